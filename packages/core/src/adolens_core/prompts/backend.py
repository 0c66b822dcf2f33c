"""Review prompt for .NET / GraphQL backend pull requests."""

from adolens_core.prompts._review import build_review_prompt

STACK_RULES = """
BACKEND-SPECIFIC RULES:
- Null Reference: Proper null checks, null-conditional operators
- Async/Await: Missing await, unhandled promise rejections, deadlocks
- SQL Injection: Parameterized queries, proper escaping
- Authorization: Missing authorization checks, privilege escalation
- N+1 Queries: Missing includes/joins, inefficient data loading
- Performance: Missing indexes, inefficient algorithms, memory leaks
- API Validation: Input validation, error handling, status codes
- Error Handling: Proper exception handling, error messages, logging
"""

CRITICAL_RULES = """
- Only mark CRITICAL if bug is EVIDENT in visible code
- Do NOT assume external/inherited methods return null
- If method validation is unknown, mark IMPORTANT with "(verify)" note
- Prefer false negatives over false positives for CRITICAL
- Common safe patterns: GetCurrentUser, GetCurrentUserEmail usually throw if null
"""

_AC_ROWS = """
| 1 | User can upload file | Done | Service.Upload |
| 2 | Validate file size | Missing | Not implemented |
| 3 | Show error message | Done | Controller.Handle |
"""

_FILES = ("Query.cs", "Mutation.cs", "Service.cs")

PROMPT_WITH_STORY = build_review_prompt(STACK_RULES, CRITICAL_RULES, _FILES, "Class.Method", _AC_ROWS, True)
PROMPT_NO_STORY = build_review_prompt(STACK_RULES, CRITICAL_RULES, _FILES, "Class.Method", _AC_ROWS, False)
