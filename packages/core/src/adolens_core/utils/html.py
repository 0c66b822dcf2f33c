"""HTML stripping for Azure DevOps rich-text fields.

Work item descriptions and acceptance criteria arrive as HTML fragments
authored in the DevOps web editor. The LLM prompts only need the text, so
three normalisations are offered depending on how much structure the
downstream prompt needs.
"""

from __future__ import annotations

import re

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_NEWLINES_RE = re.compile(r"\n+")

_BLOCK_CLOSE_RE = re.compile(r"</(div|p|br|h[1-6]|li|ul|ol)>", re.IGNORECASE)
_LINE_BREAK_RE = re.compile(r"<(br|hr)\s*/?>", re.IGNORECASE)
_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")

_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
}


def strip_html_to_text(html: str | None) -> str:
    """Remove every tag and collapse all whitespace into single spaces."""
    if not html:
        return ""
    text = _TAG_RE.sub(" ", html)
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_html_to_lines(html: str | None) -> str:
    """Replace every tag with a newline and collapse consecutive newlines."""
    if not html:
        return ""
    text = _TAG_RE.sub("\n", html)
    return _NEWLINES_RE.sub("\n", text).strip()


def strip_html_structured(html: str | None) -> str:
    """Strip tags while keeping paragraph and list boundaries.

    Block-level closing tags and ``<br>``/``<hr>`` become newlines before the
    remaining tags are dropped, so the completeness analysis still sees where
    one paragraph or bullet ends and the next begins. At most one blank line
    is kept between blocks.
    """
    if not html:
        return ""
    text = _BLOCK_CLOSE_RE.sub("\n", html)
    text = _LINE_BREAK_RE.sub("\n", text)
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES.items():
        text = text.replace(entity, char)
    return _EXCESS_BLANK_LINES_RE.sub("\n\n", text).strip()
