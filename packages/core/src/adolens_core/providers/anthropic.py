from __future__ import annotations

from adolens_core.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str, model: str | None = None):
        super().__init__(model)
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'adolens[anthropic]'"
            )
        self.client = Anthropic(api_key=api_key, max_retries=0)

    def _call_api(self, messages: list[dict], max_tokens: int, temperature: float, timeout: float) -> str | None:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic.types import TextBlock

        # Anthropic takes the system prompt as a parameter, not as a message.
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        kwargs = {"system": system} if system else {}
        response = self.client.messages.create(
            model=self.model,
            messages=[m for m in messages if m["role"] != "system"],
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
            **kwargs,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()
