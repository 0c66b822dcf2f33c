"""Optional design context from Figma.

A pasted Figma link is turned into a short text summary (file name,
component names, top-level frames, text snippets) that is fed to the
completeness check. Nothing here raises: without a token, or on any
failure, the caller gets the URL back as a fallback description.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import unquote

import requests

from adolens_core.http import DEFAULT_TIMEOUT, HttpError, http_get

logger = logging.getLogger(__name__)

FIGMA_API_URL = "https://api.figma.com/v1"
NO_CONTENT_MESSAGE = "Could not extract Figma content"

MAX_DEPTH = 5
MAX_FRAME_DEPTH = 2
MAX_TEXT_CHARS = 50
MAX_COMPONENTS = 10
MAX_ELEMENTS = 15

_FILE_RE = re.compile(r"figma\.com/(?:file|design)/([a-zA-Z0-9]+)")
_NODE_RE = re.compile(r"node-id=([^&]+)")


@dataclass(frozen=True)
class FigmaContent:
    success: bool
    summary: str | None = None
    error: str | None = None
    fallback: str | None = None


def is_figma_url(text: str) -> bool:
    return "figma.com/" in text


def parse_figma_url(url: str) -> tuple[str, str | None] | None:
    """Return ``(file_id, node_id)`` for a file or design link, else None.

    Links carry node ids as ``123:456`` (often percent-encoded); the nodes
    endpoint wants ``123-456``.
    """
    file_match = _FILE_RE.search(url or "")
    if not file_match:
        return None
    node_id = None
    node_match = _NODE_RE.search(url)
    if node_match:
        node_id = unquote(node_match.group(1)).replace(":", "-", 1)
    return file_match.group(1), node_id


def fetch_figma_content(url: str, token: str | None, timeout: float = DEFAULT_TIMEOUT) -> FigmaContent:
    if not token:
        return FigmaContent(success=False, error="No FIGMA_PAT configured", fallback=url)

    parsed = parse_figma_url(url)
    if parsed is None:
        return FigmaContent(success=False, error="Invalid Figma URL", fallback=url)

    file_id, node_id = parsed
    api_url = f"{FIGMA_API_URL}/files/{file_id}"
    if node_id:
        api_url += f"/nodes?ids={node_id}"

    try:
        data = http_get(api_url, {"X-Figma-Token": token}, timeout)
    except HttpError as e:
        return FigmaContent(success=False, error=f"Figma API {e.status_code}: {e.body}", fallback=url)
    except (requests.RequestException, ValueError) as e:
        logger.debug("Figma request for %s failed: %s", url, e)
        return FigmaContent(success=False, error=str(e), fallback=url)

    return FigmaContent(success=True, summary=extract_figma_summary(data, node_id))


def extract_figma_summary(data: dict, node_id: str | None = None) -> str:
    elements: list[str] = []
    components: list[str] = []

    def traverse(node: dict, depth: int = 0) -> None:
        if depth > MAX_DEPTH:
            return
        node_type = node.get("type")
        name = node.get("name")
        if name and node_type:
            if node_type == "TEXT" and node.get("characters"):
                elements.append(f'Text: "{node["characters"][:MAX_TEXT_CHARS]}"')
            elif node_type in ("COMPONENT", "INSTANCE"):
                if name not in components:
                    components.append(name)
            elif node_type == "FRAME" and depth <= MAX_FRAME_DEPTH:
                elements.append(f"Frame: {name}")
        for child in node.get("children") or []:
            traverse(child, depth + 1)

    if node_id and data.get("nodes"):
        node_data = data["nodes"].get(node_id.replace("-", ":", 1)) or {}
        if node_data.get("document"):
            traverse(node_data["document"])
    elif data.get("document"):
        traverse(data["document"])

    parts = []
    if data.get("name"):
        parts.append(f"File: {data['name']}")
    if components:
        parts.append(f"Components: {', '.join(components[:MAX_COMPONENTS])}")
    if elements:
        parts.append(f"Elements: {'; '.join(elements[:MAX_ELEMENTS])}")
    return "\n".join(parts) or NO_CONTENT_MESSAGE
