"""Copy command output to the system clipboard."""

from __future__ import annotations

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """Return True if ``text`` reached the clipboard.

    Never raises: a headless box without a clipboard mechanism just gets
    False, and the caller prints the text instead.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.debug("Clipboard unavailable: %s", e)
        return False
    logger.debug("Copied %d chars to the clipboard", len(text))
    return True
