from __future__ import annotations

from openai import OpenAI

from adolens_core.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    MODEL = "gpt-4o"
    BASE_URL: str | None = None

    def __init__(self, api_key: str, model: str | None = None):
        super().__init__(model)
        # SDK retries are disabled: a failed call is reported, not repeated.
        self.client = OpenAI(api_key=api_key, base_url=self.BASE_URL, max_retries=0)

    def _call_api(self, messages: list[dict], max_tokens: int, temperature: float, timeout: float) -> str | None:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class GroqProvider(OpenAIProvider):
    # Groq serves an OpenAI-compatible chat completions API.
    MODEL = "llama-3.3-70b-versatile"
    BASE_URL = "https://api.groq.com/openai/v1"
