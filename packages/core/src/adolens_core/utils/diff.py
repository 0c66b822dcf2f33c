"""Compact, line-numbered diffs for LLM review prompts.

Azure DevOps does not hand out unified patches over REST, so the review
pipeline fetches both revisions of each file and compares them here. The
rendering is deliberately simple: every line carries its 1-based number in
the new file so the model can cite it back, and changed lines are marked
with ``+``. Removed trailing lines show up as ``+<n>|`` with empty content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_NEW_FILE_LINES = 150
MAX_CONTEXT_LINES = 3
MAX_RENDERED_LINES = 100
SEPARATOR = "..."


@dataclass(frozen=True)
class DiffBlock:
    file_path: str
    rendered_text: str
    added_line_count: int

    def render(self) -> str:
        return f"\n### {self.file_path}\n```\n{self.rendered_text}\n```\n"


def _render_new_file(new_content: str, max_lines: int) -> str:
    lines = new_content.split("\n")[:max_lines]
    return "\n".join(f"+{i + 1}|{line}" for i, line in enumerate(lines))


def extract_changed_lines(
    old_content: str | None,
    new_content: str,
    max_context: int = MAX_CONTEXT_LINES,
    max_new_file_lines: int = MAX_NEW_FILE_LINES,
) -> str:
    """Render the lines that differ between two revisions, with context.

    Lines are compared by index, not aligned: an insertion near the top of a
    file marks everything below it as changed. That is acceptable for prompt
    building and the output is capped at ``MAX_RENDERED_LINES`` anyway.
    """
    if not old_content:
        if not new_content:
            return ""
        return _render_new_file(new_content, max_new_file_lines)

    old_lines = old_content.split("\n")
    new_lines = (new_content or "").split("\n")

    def at(lines: list[str], index: int) -> str | None:
        return lines[index] if index < len(lines) else None

    marked: set[int] = set()
    for i in range(max(len(old_lines), len(new_lines))):
        if at(old_lines, i) != at(new_lines, i):
            marked.add(i)
            start = max(0, i - max_context)
            end = min(len(new_lines) - 1, i + max_context)
            marked.update(range(start, end + 1))

    rendered: list[str] = []
    last = -10
    for index in sorted(marked):
        if index > last + 1 and rendered:
            rendered.append(SEPARATOR)
        prefix = "+" if at(old_lines, index) != at(new_lines, index) else " "
        rendered.append(f"{prefix}{index + 1}|{at(new_lines, index) or ''}")
        last = index

    return "\n".join(rendered[:MAX_RENDERED_LINES])


def count_added_lines(rendered: str) -> int:
    return sum(1 for line in rendered.split("\n") if line.startswith("+"))


def build_diff_blocks(
    client,
    repo_id: str,
    changes: list,
    source_commit: str,
    target_commit: str,
    max_files: int = 8,
    max_new_file_lines: int = 100,
    max_context: int = MAX_CONTEXT_LINES,
) -> list[DiffBlock]:
    """Fetch both revisions of each changed file and render one block per file.

    Files are handled one at a time in listing order. A file whose new
    revision cannot be read is skipped; added files are rendered in full
    (up to ``max_new_file_lines``) without fetching an old revision.
    """
    blocks: list[DiffBlock] = []
    for change in changes[:max_files]:
        if not change.path:
            continue

        new_content = client.get_file_at_commit(repo_id, source_commit, change.path)
        if not new_content:
            logger.debug("No content for %s at %s; skipping", change.path, source_commit)
            continue

        if change.change_type == "add":
            rendered = extract_changed_lines(None, new_content, max_new_file_lines=max_new_file_lines)
        else:
            old_content = client.get_file_at_commit(repo_id, target_commit, change.path)
            rendered = extract_changed_lines(old_content, new_content, max_context=max_context)

        if rendered:
            blocks.append(DiffBlock(change.path, rendered, count_added_lines(rendered)))

    return blocks


def render_diff_blocks(blocks: list[DiffBlock]) -> str:
    return "".join(block.render() for block in blocks)
