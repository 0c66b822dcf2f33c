"""Reduce pull request discussion threads to the comments that still need work.

The threads endpoint is inconsistent about thread status: depending on the
API path it reports either the string name (``"active"``) or the numeric
``CommentThreadStatus`` value (``1``). Both forms are accepted.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_ACTIVE_STATUSES = ("active", 1)
_CLOSED_STATUSES = ("fixed", "closed", 2, 4)
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


class ThreadPolicy(enum.Enum):
    ACTIVE_ONLY = "active"  # keep threads explicitly marked active
    NOT_CLOSED = "not-closed"  # keep everything that is not fixed/closed


@dataclass(frozen=True)
class PendingComment:
    file: str | None
    line: int | None
    comment: str


def _is_pending(status, policy: ThreadPolicy) -> bool:
    if policy is ThreadPolicy.ACTIVE_ONLY:
        return status in _ACTIVE_STATUSES
    return status not in _CLOSED_STATUSES


def _thread_location(thread: dict) -> tuple[str | None, int | None]:
    context = thread.get("threadContext") or {}
    file_path = context.get("filePath") or None
    line = (context.get("rightFileStart") or {}).get("line") or (context.get("leftFileStart") or {}).get("line")
    return file_path, line or None


def extract_pending_comments(
    threads: list[dict],
    policy: ThreadPolicy = ThreadPolicy.ACTIVE_ONLY,
) -> list[PendingComment]:
    comments: list[PendingComment] = []
    for thread in threads:
        if thread.get("isDeleted"):
            continue
        if not _is_pending(thread.get("status"), policy):
            continue

        file_path, line = _thread_location(thread)
        for comment in thread.get("comments") or []:
            if comment.get("commentType") == "system":
                continue
            content = comment.get("content")
            if not content:
                continue
            comments.append(PendingComment(file_path, line, _NEWLINE_RE.sub(" ", content).strip()))

    return comments


def format_comments_for_prompt(comments: list[PendingComment]) -> str:
    lines = []
    for c in comments:
        location = f"{c.file} line {c.line}" if c.line else (c.file or "General")
        lines.append(f'- {location}: "{c.comment}"')
    return "\n".join(lines)
