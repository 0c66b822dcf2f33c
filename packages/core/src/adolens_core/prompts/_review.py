from __future__ import annotations

_HEADER = """Output a code review with the EXACT structure below.

Review only + lines. Be concise.

CLASSIFICATION:
- CRITICAL: Bugs, Security
- IMPORTANT: Performance, CleanCode
- MINOR: BestPractices

VERDICT:
- Any CRITICAL -> REQUEST CHANGES
- Any IMPORTANT -> APPROVE WITH COMMENTS
- Only MINOR or nothing -> APPROVE
"""

_AC_RULES = """- AC Coverage table MUST have 4 columns: AC | Description | Status | Where
- Description column: 2-5 words summarizing each AC
"""

_ISSUES_TABLE = """## Code Review

### Good
- [positive point]

### Issues

| Severity | Category | File | Line | Issue | Fix |
|----------|----------|------|------|-------|-----|
| CRITICAL | Bugs | {file_a} | 45 | [brief] | [brief] |
| IMPORTANT | Performance | {file_b} | 120 | [brief] | [brief] |
| MINOR | CleanCode | {file_c} | 30 | [brief] | [brief] |

### Missing Tests
- {missing_test}
"""

_AC_TABLE = """
### AC Coverage
*(MUST include Description column with 2-5 word summary of each AC)*

| AC | Description | Status | Where |
|----|-------------|--------|-------|
{ac_rows}
"""

_VERDICT = """
### Verdict
**APPROVE**

---
*adolens review*"""


def build_review_prompt(
    stack_rules: str,
    critical_rules: str,
    example_files: tuple[str, str, str],
    missing_test: str,
    ac_rows: str,
    with_story: bool,
) -> str:
    """Assemble a review prompt from the parts that differ per stack.

    The story variant adds the AC coverage table and its rules; the other
    variant ends with a "No US linked" marker instead.
    """
    file_a, file_b, file_c = example_files
    rules = f"- File column: ONLY filename (e.g. \"{file_a}\"), NOT full path\n"
    if with_story:
        rules += _AC_RULES
    rules += "- Do NOT repeat the input files or CHANGES section\n- Output ONLY the review structure below\n"

    body = _ISSUES_TABLE.format(file_a=file_a, file_b=file_b, file_c=file_c, missing_test=missing_test)
    if with_story:
        body += _AC_TABLE.format(ac_rows=ac_rows.strip("\n"))
    body += _VERDICT
    if not with_story:
        body += "\nNo US linked"

    return (
        f"{_HEADER}\n{stack_rules.strip()}\n\n"
        f"CRITICAL BUGS RULES (avoid false positives):\n{critical_rules.strip()}\n\n"
        f"RULES:\n{rules}\n"
        "---\nOUTPUT STRUCTURE:\n---\n\n"
        f"{body}"
    )
