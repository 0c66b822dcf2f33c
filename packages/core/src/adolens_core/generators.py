"""Single-shot LLM generators for the work-item commands.

Each generator builds one prompt from a work item (or from pending PR
comments), makes one completion call with its own token and temperature
budget, and hands back text ready for the clipboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console

from adolens_core.ado.threads import PendingComment, format_comments_for_prompt
from adolens_core.ado.work_items import WorkItemSummary
from adolens_core.http import LLM_LONG_TIMEOUT, LLM_SHORT_TIMEOUT
from adolens_core.output import (
    AC_PLACEHOLDER,
    ValidationResult,
    clean_backend_output,
    clean_frontend_output,
    needs_retry,
    only_missing_ac,
    validate_backend_output,
    validate_frontend_output,
)
from adolens_core.prompts import specs

console = Console()
logger = logging.getLogger(__name__)

BACKEND = "be"
FRONTEND = "fe"
TASK_TAGS = {BACKEND: "BE", FRONTEND: "FE"}
_LABELS = {BACKEND: "Backend", FRONTEND: "Frontend"}

# (prompt, max_tokens, cleaner, validator)
_SPEC_SETTINGS = {
    BACKEND: (specs.BACKEND_SPEC_PROMPT, 300, clean_backend_output, validate_backend_output),
    FRONTEND: (specs.FRONTEND_SPEC_PROMPT, 350, clean_frontend_output, validate_frontend_output),
}
_SPEC_TEMPERATURE = 0.05
_MAX_SPEC_ATTEMPTS = 2


@dataclass
class SpecResult:
    text: str
    validation: ValidationResult
    attempts: int = 1


@dataclass
class TaskDraft:
    title: str
    description: str


def _check_kind(kind: str) -> str:
    kind = (kind or "").lower()
    if kind not in TASK_TAGS:
        raise ValueError(f"Unknown kind: {kind!r}. Choose 'be' or 'fe'.")
    return kind


# ---------------------------------------------------------------------- #
# spec                                                                     #
# ---------------------------------------------------------------------- #


def build_spec_message(prompt: str, story: WorkItemSummary) -> str:
    return (
        f"{prompt}\n\n"
        f"Title: {story.title}\n"
        f"Description: {story.description}\n"
        f"Acceptance Criteria: {story.acceptance_criteria}"
    )


def compile_spec(provider, story: WorkItemSummary, kind: str = BACKEND) -> SpecResult:
    """Turn a user story into a compact backend or frontend spec.

    The output is cleaned and validated. A lone missing ``AC:`` section is
    patched with a placeholder; truncated output is retried once. Any
    remaining problems are returned in ``validation`` for the caller to show.
    """
    prompt, max_tokens, clean, validate = _SPEC_SETTINGS[_check_kind(kind)]
    message = build_spec_message(prompt, story)

    attempt = 0
    while True:
        attempt += 1
        content = provider.complete(
            message, max_tokens=max_tokens, temperature=_SPEC_TEMPERATURE, timeout=LLM_SHORT_TIMEOUT
        )
        text = clean(content)
        validation = validate(text)

        if validation.is_valid:
            break
        if only_missing_ac(validation):
            text += AC_PLACEHOLDER
            break
        if needs_retry(validation) and attempt < _MAX_SPEC_ATTEMPTS:
            logger.debug("Spec attempt %d rejected: %s", attempt, "; ".join(validation.messages))
            console.print("  Incomplete output, retrying...")
            continue
        break

    return SpecResult(text=text, validation=validation, attempts=attempt)


# ---------------------------------------------------------------------- #
# check                                                                    #
# ---------------------------------------------------------------------- #


def build_check_message(story: WorkItemSummary, figma_context: str | None) -> str:
    prompt = specs.CHECK_PROMPT.replace("{FIGMA_CONTEXT}", figma_context or specs.NO_FIGMA_CONTEXT)
    return (
        f"{prompt}\n\n"
        "USER STORY:\n"
        f"Title: {story.title}\n\n"
        f"Description:\n{story.description or '(No description)'}\n\n"
        f"Acceptance Criteria:\n{story.acceptance_criteria or '(No acceptance criteria)'}"
    )


def analyze_story(provider, story: WorkItemSummary, figma_context: str | None = None) -> str:
    """Return a Markdown completeness report for ``story``."""
    return provider.complete(
        build_check_message(story, figma_context),
        max_tokens=1500,
        temperature=0.2,
        timeout=LLM_LONG_TIMEOUT,
    )


# ---------------------------------------------------------------------- #
# task                                                                     #
# ---------------------------------------------------------------------- #


def build_task_message(story: WorkItemSummary, kind: str) -> str:
    prompt = specs.BACKEND_TASK_PROMPT if kind == BACKEND else specs.FRONTEND_TASK_PROMPT
    return (
        f"{prompt}\n\n"
        f"User Story #{story.id}: {story.title}\n\n"
        f"Description:\n{story.description}\n\n"
        f"Acceptance Criteria:\n{story.acceptance_criteria}"
    )


def parse_task_output(output: str) -> TaskDraft:
    """Pull ``Title:`` and the ``- `` bullets after ``Description:`` out of the reply."""
    title = ""
    bullets: list[str] = []
    in_description = False
    for raw in (output or "").split("\n"):
        line = raw.strip()
        if not line:
            continue
        lowered = line.lower()
        if lowered.startswith("title:"):
            title = line[len("title:") :].strip()
        elif lowered.startswith("description:"):
            in_description = True
        elif in_description and line.startswith("-"):
            bullets.append(line)
    return TaskDraft(title=title, description="\n".join(bullets))


def generate_task(provider, story: WorkItemSummary, kind: str) -> TaskDraft:
    kind = _check_kind(kind)
    output = provider.complete(
        build_task_message(story, kind),
        system_prompt=specs.TASK_SYSTEM_PROMPT.format(label=_LABELS[kind]),
        max_tokens=800,
        temperature=0.3,
        timeout=LLM_SHORT_TIMEOUT,
    )
    return parse_task_output(output)


def ensure_task_prefix(title: str, kind: str) -> str:
    """Prefix an edited title with ``[BE]``/``[FE]`` unless it already has one."""
    title = title.strip()
    if any(title.startswith(f"[{tag}]") for tag in TASK_TAGS.values()):
        return title
    return f"[{TASK_TAGS[_check_kind(kind)]}] {title}"


# ---------------------------------------------------------------------- #
# fix                                                                      #
# ---------------------------------------------------------------------- #


def generate_fix_prompt(provider, comments: list[PendingComment]) -> str | None:
    """Condense pending review comments into a short fix list; None when there are none."""
    if not comments:
        return None
    comments_text = format_comments_for_prompt(comments)
    return provider.complete(
        f"{specs.FIX_PROMPT}\n\nPR COMMENTS:\n{comments_text}",
        max_tokens=300,
        temperature=0.05,
        timeout=LLM_SHORT_TIMEOUT,
    )
