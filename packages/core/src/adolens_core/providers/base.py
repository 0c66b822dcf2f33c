"""Base LLM provider.

Every command makes exactly one completion call per attempt:
    complete() → _build_messages() → _call_api()   ← only this differs per provider

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response

There is no transport retry here. Network and status errors from the SDK
propagate to the command, which reports them and exits; the only retry in
the tool is the spec generators' single retry on truncated output.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from adolens_core.http import LLM_SHORT_TIMEOUT

logger = logging.getLogger(__name__)

_MAX_TOKENS = 1000
_TEMPERATURE = 0.1


class LLMError(Exception):
    """Raised when the provider answers but the answer carries no text."""


class BaseProvider(ABC):
    MODEL: str = ""

    def __init__(self, model: str | None = None):
        self.model = model or self.MODEL

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        max_tokens: int = _MAX_TOKENS,
        temperature: float = _TEMPERATURE,
        timeout: float = LLM_SHORT_TIMEOUT,
    ) -> str:
        """Send one prompt and return the completion text."""
        logger.debug(
            "%s: model=%s max_tokens=%d temperature=%.2f", self.__class__.__name__, self.model, max_tokens, temperature
        )
        content = self._call_api(self._build_messages(user_prompt, system_prompt), max_tokens, temperature, timeout)
        if not content:
            raise LLMError(f"Invalid response from {self.__class__.__name__}: empty completion")
        return content

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, messages: list[dict], max_tokens: int, temperature: float, timeout: float) -> str | None:
        """Make a single API call and return the raw text response (or None if empty)."""

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_messages(user_prompt: str, system_prompt: str | None) -> list[dict]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return messages
