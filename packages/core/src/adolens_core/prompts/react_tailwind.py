"""Review prompt for React + Tailwind CSS frontend pull requests."""

from adolens_core.prompts._review import build_review_prompt

STACK_RULES = """
FRONTEND-SPECIFIC RULES:
- TypeScript: Avoid `any` type, ensure proper typing
- React Hooks: Check dependencies arrays, rules of hooks violations
- Memory Leaks: Missing cleanup in useEffect, event listeners, subscriptions
- Memoization: Unnecessary re-renders, missing useMemo/useCallback
- Tailwind CSS: Consistent utility classes, responsive design (sm:, md:, lg:), dark mode support
- State Management: Proper state lifting, context usage, Apollo cache updates
- Accessibility: ARIA labels, keyboard navigation, color contrast
- Security: XSS vulnerabilities, sensitive data exposure, input sanitization
"""

CRITICAL_RULES = """
- Only mark CRITICAL if bug is EVIDENT in visible code
- Do NOT flag useEffect with empty deps if intentionally run once
- Do NOT flag inline functions in JSX if performance is not a concern
- Prefer false negatives over false positives for CRITICAL
"""

_AC_ROWS = """
| 1 | User can view profile | Done | UserProfile.tsx |
| 2 | Profile loads on mount | Missing | Not implemented |
| 3 | Error message displayed | Done | UserProfile.Error |
"""

_FILES = ("UserProfile.tsx", "UserProfile.tsx", "UserProfile.tsx")

PROMPT_WITH_STORY = build_review_prompt(STACK_RULES, CRITICAL_RULES, _FILES, "Component.test.tsx", _AC_ROWS, True)
PROMPT_NO_STORY = build_review_prompt(STACK_RULES, CRITICAL_RULES, _FILES, "Component.test.tsx", _AC_ROWS, False)
