"""Core PR review orchestration."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field

from rich.console import Console

from adolens_core.ado.client import ChangeEntry, NotFoundError
from adolens_core.ado.work_items import WorkItemSummary, extract_fields, resolve_linked_story
from adolens_core.config import load_guidelines
from adolens_core.http import LLM_LONG_TIMEOUT, HttpError
from adolens_core.prompts import REVIEW_SYSTEM_PROMPT, get_review_prompt
from adolens_core.review import ReviewIssue, parse_review_issues
from adolens_core.utils.code import filter_code_changes
from adolens_core.utils.diff import build_diff_blocks, render_diff_blocks

console = Console()
logger = logging.getLogger(__name__)

_REVIEW_MAX_TOKENS = 1800
_REVIEW_TEMPERATURE = 0.1


@dataclass
class ReviewResult:
    """Everything the CLI needs to show, copy and optionally publish a review."""

    pr_id: int
    repo: dict
    pr_title: str
    text: str
    iteration_id: int
    story: WorkItemSummary | None = None
    changes: list[ChangeEntry] = field(default_factory=list)
    issues: list[ReviewIssue] = field(default_factory=list)
    reviewed_files: list[str] = field(default_factory=list)
    added_lines: int = 0


def _is_excluded(path: str, patterns: list[str]) -> bool:
    """Return True if path matches any exclude pattern.

    Supports:
    - fnmatch globs on the full path: "/src/Generated/*.cs"
    - fnmatch globs on the basename: "*.min.js", "*.Designer.cs"
    - Directory names/prefixes: "Migrations/" (matches any file within that tree)
    """
    name = path.lstrip("/")
    for pattern in patterns:
        if fnmatch.fnmatch(name, pattern.lstrip("/")):
            return True
        if fnmatch.fnmatch(name.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.strip("/") + "/"
        if name.startswith(prefix) or ("/" + prefix) in name:
            return True
    return False


def build_review_message(
    prompt: str,
    pr_title: str,
    diff_text: str,
    story: WorkItemSummary | None = None,
    guidelines: str | None = None,
) -> str:
    story_context = f"\nUS#{story.id}: {story.title}\nAC:\n{story.acceptance_criteria}" if story else ""
    guidelines_block = f"\n\nTEAM GUIDELINES:\n{guidelines.strip()}" if guidelines else ""
    return f"{prompt}{guidelines_block}{story_context}\n\nPR: {pr_title}\n\nCHANGES:\n{diff_text}"


def find_linked_story(client, repo_id: str, pr_id: int) -> WorkItemSummary | None:
    linked = client.get_pull_request_work_items(repo_id, pr_id)
    story = resolve_linked_story(client, linked)
    return extract_fields(story) if story else None


def run_review(
    client,
    provider,
    pr_id: int,
    config,
    repo_name: str | None = None,
    stack: str | None = None,
) -> ReviewResult | None:
    """Run the review pipeline for one pull request.

    Returns None when there is nothing to review (no code files changed, or
    no readable content in them). Raises NotFoundError when the repository
    or pull request does not exist.
    """
    repo = client.require_repository(repo_name or config.azure_repo)
    console.print(f"  Repo: [bold]{repo['name']}[/bold]")

    try:
        pr = client.get_pull_request(repo["id"], pr_id)
    except HttpError as e:
        if e.status_code == 404:
            raise NotFoundError(f"PR #{pr_id} not found in {repo['name']}.")
        raise
    pr_title = pr.get("title") or ""
    console.print(f'  "{pr_title}"')
    console.print(f"  Author: {(pr.get('createdBy') or {}).get('displayName') or 'Unknown'}")

    source_commit = (pr.get("lastMergeSourceCommit") or {}).get("commitId")
    target_commit = (pr.get("lastMergeTargetCommit") or {}).get("commitId")

    story = find_linked_story(client, repo["id"], pr_id)
    if story:
        console.print(f'  US#{story.id}: "{story.title}"')
    else:
        console.print("  [yellow]No US linked[/yellow]")

    console.print("  Getting changes...")
    iterations = client.get_iterations(repo["id"], pr_id)
    if not iterations:
        raise NotFoundError(f"PR #{pr_id} has no iterations.")
    iteration_id = iterations[-1]["id"]
    changes = client.get_changes(repo["id"], pr_id, iteration_id)

    code_changes = filter_code_changes(changes)
    exclude = config.exclude or []
    if exclude:
        kept = [c for c in code_changes if not _is_excluded(c.path, exclude)]
        if len(kept) < len(code_changes):
            console.print(f"  [dim]Excluded {len(code_changes) - len(kept)} file(s) by config.[/dim]")
        code_changes = kept
    console.print(f"  {len(code_changes)} code file(s) changed")

    if not code_changes:
        console.print("  [yellow]No code files.[/yellow]")
        return None

    console.print("  Extracting diffs...")
    blocks = build_diff_blocks(
        client,
        repo["id"],
        code_changes,
        source_commit,
        target_commit,
        max_files=config.max_files,
        max_new_file_lines=config.max_new_file_lines,
        max_context=config.max_context_lines,
    )
    added_lines = sum(b.added_line_count for b in blocks)
    console.print(f"  ~{added_lines} lines changed")

    diff_text = render_diff_blocks(blocks)
    if not diff_text.strip():
        console.print("  [yellow]No significant changes found.[/yellow]")
        return None

    prompt = get_review_prompt(stack or config.review_stack, with_story=story is not None)
    message = build_review_message(prompt, pr_title, diff_text, story, load_guidelines(config))
    logger.debug("Review prompt: %d chars across %d file(s)", len(message), len(blocks))

    console.print("  Reviewing...")
    text = provider.complete(
        message,
        system_prompt=REVIEW_SYSTEM_PROMPT,
        max_tokens=_REVIEW_MAX_TOKENS,
        temperature=_REVIEW_TEMPERATURE,
        timeout=LLM_LONG_TIMEOUT,
    )

    return ReviewResult(
        pr_id=pr_id,
        repo=repo,
        pr_title=pr_title,
        text=text,
        iteration_id=iteration_id,
        story=story,
        changes=changes,
        issues=parse_review_issues(text),
        reviewed_files=[b.file_path for b in blocks],
        added_lines=added_lines,
    )
