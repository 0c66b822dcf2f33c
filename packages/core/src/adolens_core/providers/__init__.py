from __future__ import annotations

from adolens_core.providers.base import BaseProvider


def get_provider(config) -> BaseProvider:
    """Build the provider named by ``config.provider`` with its API key."""
    provider = config.provider
    if provider == "groq":
        from adolens_core.providers.openai import GroqProvider

        return GroqProvider(api_key=config.groq_api_key)
    if provider == "openai":
        from adolens_core.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key=config.openai_api_key)
    if provider == "anthropic":
        from adolens_core.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=config.anthropic_api_key)
    raise ValueError(f"Unknown provider: {provider!r}. Choose 'groq', 'openai' or 'anthropic'.")
