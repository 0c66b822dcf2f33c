"""Clean and validate LLM output for the spec commands.

The spec prompts ask for a rigid, section-based format. Models still add
chatty intros, wrap the answer in code fences, or drift into the wrong
layer (button labels in a backend spec, database talk in a UI spec). The
helpers here trim that noise and report which required sections are
missing so the caller can patch, retry once, or warn.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

UI_KEYWORDS = (
    "click",
    "button",
    "modal",
    "icon",
    "display",
    "show",
    "figma",
    "tab",
    "scroll",
    "view",
    "disabled",
    "enabled",
    "visible",
    "hidden",
    "screen",
    "page",
    "navigate",
    "hover",
    "dropdown",
    "popup",
    "tooltip",
)

BACKEND_KEYWORDS = (
    "database",
    "sql",
    "repository",
    "entity framework",
    "migration",
    "dbcontext",
    "connection string",
    "stored procedure",
)

MISSING_AC_MESSAGE = 'Missing "AC:" section'
AC_PLACEHOLDER = "\n\nAC: (verify manually)"

_PREAMBLE_RE = re.compile(r"^(Here is|Here's|The following|Below is|I've extracted)[^\n]*\n*", re.IGNORECASE)
_EMPTY_FENCE_RE = re.compile(r"```[a-z]*\s*```")
_FENCE_OPEN_RE = re.compile(r"```[a-z]*\n?", re.IGNORECASE)
_INCOMPLETE_RECORD_RE = re.compile(r"record \w+\([^)]*$", re.MULTILINE)


class IssueKind(enum.Enum):
    MISSING_SECTION = "missing_section"
    TRUNCATED = "truncated"
    INCOMPLETE_CONSTRUCT = "incomplete_construct"


@dataclass(frozen=True)
class ValidationIssue:
    kind: IssueKind
    message: str
    section: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> list[str]:
        return [i.message for i in self.issues]


# ---------------------------------------------------------------------- #
# Cleaning                                                                 #
# ---------------------------------------------------------------------- #


def remove_preamble_and_fences(text: str) -> str:
    text = _PREAMBLE_RE.sub("", text, count=1)
    text = _EMPTY_FENCE_RE.sub("", text)
    text = _FENCE_OPEN_RE.sub("", text)
    return text.replace("```", "")


def _keyword_pattern(keywords: tuple[str, ...] | list[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(kw) for kw in keywords)
    return re.compile(rf"\b(?:{alternatives})(?:s|es|ed|ing)?\b", re.IGNORECASE)


def filter_keywords(text: str, keywords: tuple[str, ...] | list[str]) -> str:
    """Drop every line that mentions one of ``keywords``.

    Terms match as whole words, with an optional plural or verb suffix, so
    "tab" removes "tabs" but leaves "table" and "database" alone.
    """
    if not keywords:
        return text.strip()
    pattern = _keyword_pattern(keywords)
    kept = [line for line in text.split("\n") if not pattern.search(line)]
    return "\n".join(kept).strip()


def clean_backend_output(text: str) -> str:
    return filter_keywords(remove_preamble_and_fences(text), UI_KEYWORDS)


def clean_frontend_output(text: str) -> str:
    return filter_keywords(remove_preamble_and_fences(text), BACKEND_KEYWORDS)


# ---------------------------------------------------------------------- #
# Validation                                                               #
# ---------------------------------------------------------------------- #


def _check_markers(text: str, markers: list[tuple[tuple[str, ...], str]]) -> list[ValidationIssue]:
    issues = []
    for alternatives, message in markers:
        if not any(marker in text for marker in alternatives):
            issues.append(ValidationIssue(IssueKind.MISSING_SECTION, message, alternatives[0]))
    return issues


def _looks_truncated(text: str) -> bool:
    stripped = text.rstrip()
    return bool(stripped) and stripped[-1] in "-:,"


_BACKEND_MARKERS = [
    (("Mutation:",), 'Missing "Mutation:" section'),
    (("- Name:",), 'Missing "- Name:" in Mutation'),
    (("- Input:",), 'Missing "- Input:" in Mutation'),
    (("- Returns:",), 'Missing "- Returns:" in Mutation'),
    (("Behavior:",), 'Missing "Behavior:" section'),
    (("Rules:",), 'Missing "Rules:" section'),
    (("AC:",), MISSING_AC_MESSAGE),
]

_FRONTEND_MARKERS = [
    (("Component:",), 'Missing "Component:" section'),
    (("- Name:",), 'Missing "- Name:" in Component'),
    (("UI Elements:", "Elements:"), 'Missing "UI Elements:" section'),
    (("Behavior:", "Interactions:"), 'Missing "Behavior:" or "Interactions:" section'),
    (("AC:",), MISSING_AC_MESSAGE),
]


def validate_backend_output(text: str) -> ValidationResult:
    issues = _check_markers(text, _BACKEND_MARKERS)
    if _looks_truncated(text):
        issues.append(ValidationIssue(IssueKind.TRUNCATED, "Output appears to be truncated"))
    if _INCOMPLETE_RECORD_RE.search(text):
        issues.append(
            ValidationIssue(IssueKind.INCOMPLETE_CONSTRUCT, "Incomplete record (missing closing parenthesis)")
        )
    return ValidationResult(issues)


def validate_frontend_output(text: str) -> ValidationResult:
    issues = _check_markers(text, _FRONTEND_MARKERS)
    if _looks_truncated(text):
        issues.append(ValidationIssue(IssueKind.TRUNCATED, "Output appears to be truncated"))
    return ValidationResult(issues)


def needs_retry(result: ValidationResult) -> bool:
    return any(i.kind in (IssueKind.TRUNCATED, IssueKind.INCOMPLETE_CONSTRUCT) for i in result.issues)


def only_missing_ac(result: ValidationResult) -> bool:
    return len(result.issues) == 1 and result.issues[0].section == "AC:"
