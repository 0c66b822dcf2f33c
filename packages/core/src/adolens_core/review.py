"""Parse the LLM review table and publish it back to the pull request."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import requests
from rich.console import Console

from adolens_core.http import HttpError

console = Console()
logger = logging.getLogger(__name__)

SEVERITIES = ("CRITICAL", "IMPORTANT", "MINOR")

# | 🔴 CRITICAL | Bugs | Query.cs | 45 | issue | fix |
# Cells never span lines; the emoji marker in front of the severity is optional.
_TABLE_ROW_RE = re.compile(
    r"\|[ \t]*((?:🔴[ \t]*)?CRITICAL|(?:🟡[ \t]*)?IMPORTANT|(?:🔵[ \t]*)?MINOR)[ \t]*"
    r"\|[ \t]*(\w+)[ \t]*"
    r"\|[ \t]*([^|\n]+\.(?:cs|js|ts|tsx|jsx|py|java|go))[ \t]*"
    r"\|[ \t]*(\d+)[ \t]*"
    r"\|([^|\n]+)"
    r"\|([^|\n]+)\|"
)


@dataclass(frozen=True)
class ReviewIssue:
    severity: str
    category: str
    file_name: str
    line: int
    issue: str
    fix: str


@dataclass
class PublishResult:
    general_posted: bool = False
    posted: int = 0
    skipped: int = 0


def parse_review_issues(review_text: str) -> list[ReviewIssue]:
    """Extract issue rows from the review table, in the order they appear.

    Rows that do not have exactly the expected six cells, name an unknown
    file type, or carry a non-numeric or zero line are ignored.
    """
    issues: list[ReviewIssue] = []
    for match in _TABLE_ROW_RE.finditer(review_text or ""):
        line = int(match.group(4))
        if line <= 0:
            continue
        issues.append(
            ReviewIssue(
                severity=match.group(1).strip(),
                category=match.group(2).strip(),
                file_name=match.group(3).strip(),
                line=line,
                issue=match.group(5).strip(),
                fix=match.group(6).strip(),
            )
        )
    return issues


def find_file_info(changes: list, file_name: str):
    """Return the first change whose path ends with or contains ``file_name``."""
    for change in changes:
        path = change.path or ""
        if path.endswith(file_name) or file_name in path:
            return change
    return None


def format_issue_comment(issue: ReviewIssue) -> str:
    return (
        f"**{issue.severity}** - {issue.category}\n\n"
        f"**Issue:** {issue.issue}\n\n"
        f"**Fix:** {issue.fix}\n\n"
        "---\n*adolens review*"
    )


def publish_review(
    client,
    repo_id: str,
    pr_id: int,
    review_text: str,
    changes: list,
    iteration_id: int,
) -> PublishResult:
    """Post the full review as a general thread, then one thread per table row.

    A failed line comment usually means the line is outside the iteration's
    diff, or the request timed out; it is counted as skipped and publishing
    carries on.
    """
    console.print("  Posting general review...")
    client.post_general_comment(repo_id, pr_id, review_text)
    result = PublishResult(general_posted=True)

    issues = parse_review_issues(review_text)
    if issues:
        console.print(f"  Posting {len(issues)} line comment(s)...")

    for issue in issues:
        change = find_file_info(changes, issue.file_name)
        if change is None:
            console.print(f"     [yellow]{issue.file_name}:{issue.line} (file not found in changes)[/yellow]")
            result.skipped += 1
            continue
        try:
            client.post_line_comment(
                repo_id,
                pr_id,
                change.path,
                issue.line,
                format_issue_comment(issue),
                iteration_id,
                change.change_tracking_id,
            )
        except (HttpError, requests.RequestException) as e:
            logger.debug("Line comment on %s:%d rejected: %s", change.path, issue.line, e)
            console.print(f"     [yellow]{issue.file_name}:{issue.line} (skipped - line may not be in diff)[/yellow]")
            result.skipped += 1
            continue
        console.print(f"     [green]{issue.file_name}:{issue.line}[/green]")
        result.posted += 1

    return result
