"""Timeout-bounded HTTP helpers shared by the tracker and design-tool adapters."""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

# Seconds. Tracker calls are small; LLM calls get their own, longer budgets.
DEFAULT_TIMEOUT = 15
LLM_SHORT_TIMEOUT = 60
LLM_LONG_TIMEOUT = 90


class HttpError(Exception):
    """Raised for any non-success HTTP response."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def http_get(url: str, headers: dict | None = None, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """GET ``url`` and return the decoded JSON body."""
    logger.debug("GET %s", url)
    res = requests.get(url, headers=headers or {}, timeout=timeout)
    if not res.ok:
        raise HttpError(res.status_code, res.text)
    return res.json()


def http_get_text(url: str, headers: dict | None = None, timeout: float = DEFAULT_TIMEOUT) -> str | None:
    """GET ``url`` and return the raw body, or None on a non-success status.

    Used for file contents, where a missing file at a given commit is an
    expected outcome rather than an error.
    """
    logger.debug("GET (text) %s", url)
    res = requests.get(url, headers=headers or {}, timeout=timeout)
    return res.text if res.ok else None


def http_post(
    url: str,
    headers: dict | None = None,
    body: Any = None,
    timeout: float = DEFAULT_TIMEOUT,
    content_type: str = "application/json",
) -> Any:
    """POST ``body`` as JSON and return the decoded JSON response."""
    logger.debug("POST %s", url)
    res = requests.post(
        url,
        headers={**(headers or {}), "Content-Type": content_type},
        json=body,
        timeout=timeout,
    )
    if not res.ok:
        raise HttpError(res.status_code, res.text)
    return res.json()
