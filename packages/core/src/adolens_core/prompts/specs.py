"""Prompts for the spec, check, task and fix commands."""

BACKEND_SPEC_PROMPT = """Extract the PRIMARY backend mutation from this user story. Output ONLY the spec, no intro text.
ALL OUTPUT MUST BE IN ENGLISH.

RULES:
- ONE mutation only (the main operation)
- BACKEND ONLY (database, API, business logic)
- IGNORE all UI (clicks, buttons, modals, display)
- C# types: Guid, string, int, bool
- Max 3 items per section
- MUST include AC section at the end

EXACT FORMAT (no deviations):

Mutation:
- Name: <PascalCase>
- Input: record <n>(Guid Field, string Field)
- Returns: record <n>(Guid Id, bool Success)

Behavior:
- <data operation 1>
- <data operation 2>

Rules:
- <business rule 1>
- <business rule 2>

AC: <list AC numbers this covers, e.g., 1, 2, 5>

MANDATORY: Always end with "AC:" followed by the acceptance criteria numbers covered.
NO intro text. NO code blocks. NO explanations. ONLY the spec above. ALL IN ENGLISH."""

FRONTEND_SPEC_PROMPT = """Extract the PRIMARY frontend component spec from this user story. Output ONLY the spec, no intro text.
ALL OUTPUT MUST BE IN ENGLISH.

RULES:
- ONE component only (the main one)
- FRONTEND ONLY (UI, interactions, display, styling)
- IGNORE all backend (database, API calls, business logic)
- Focus on: what user sees, clicks, interacts with
- Max 4 items per section
- MUST include AC section at the end

EXACT FORMAT (no deviations):

Component:
- Name: <PascalCase>Component
- Type: <modal|panel|button|list|form|card>
- Location: <where it appears in the app>

UI Elements:
- <element 1: description>
- <element 2: description>
- <element 3: description>

States:
- <state 1: when/condition>
- <state 2: when/condition>

Interactions:
- <user action 1> -> <result>
- <user action 2> -> <result>

Styling:
- <key style requirement from figma/design>

AC: <list AC numbers this covers, e.g., 1, 2, 4>

MANDATORY: Always end with "AC:" followed by the acceptance criteria numbers covered.
NO intro text. NO code blocks. NO explanations. ONLY the spec above. ALL IN ENGLISH."""

# {FIGMA_CONTEXT} is substituted with str.replace; the prompt has no other placeholders.
CHECK_PROMPT = """You are a senior requirements analyst. Analyze this User Story and determine if it's complete for development.
ALL OUTPUT MUST BE IN ENGLISH.

ANALYZE:
1. **Description**: Is it clear? Missing context? Ambiguities?
2. **Acceptance Criteria**: Do they cover all cases? Missing scenarios?
3. **Edge Cases**: What about errors, empty states, limits?
4. **Validations**: Are data validation rules specified?
5. **Permissions**: Is it defined who can do what?
6. **Figma Consistency**: Do ACs cover all screen elements?

FIGMA CONTEXT:
{FIGMA_CONTEXT}

OUTPUT FORMAT (exact):

## Status: [COMPLETE | INCOMPLETE | NEEDS REVIEW]

## Description
- Done: Well-defined aspects
- Missing: Missing or ambiguous aspects

## Acceptance Criteria
- Covered: Covered cases
- Not covered: NOT covered cases (list)

## Suggested ACs to add
1. AC#X: [description of missing AC]
2. AC#X: [description of missing AC]

## Missing validations
- [list of unspecified validations]

## Edge cases not covered
- [list of edge cases]

## Questions for Product Owner
1. [important question]
2. [important question]

## Summary
[1-2 sentences with overall status and correction priority]"""

NO_FIGMA_CONTEXT = "No Figma context provided"

_TASK_PROMPT = """Based on this User Story, generate a {label} Task.

OUTPUT FORMAT (strict):
Title: [{tag}] <concise task title in English, max 10 words>

Description:
- <technical task 1>
- <technical task 2>
- <technical task 3>
...

RULES:
- Title must start with [{tag}]
- Title should be specific and actionable
- Description: 5-10 technical tasks for {area} development
- Tasks should include: {includes}
- All in English
- No explanations, just the format above"""

BACKEND_TASK_PROMPT = _TASK_PROMPT.format(
    label="Backend",
    tag="BE",
    area="backend",
    includes="endpoints, DTOs, validation, business logic, error handling, tests",
)

FRONTEND_TASK_PROMPT = _TASK_PROMPT.format(
    label="Frontend",
    tag="FE",
    area="frontend",
    includes="components, state management, UI elements, API integration, styling, tests",
)

TASK_SYSTEM_PROMPT = "You are a {label} tech lead. Generate clear, actionable tasks."

FIX_PROMPT = """Convert these PR comments into a MINIMAL prompt for Cursor.
ALL OUTPUT MUST BE IN ENGLISH.

STRICT RULES:
- Only list of concrete actions
- One line per fix
- Format: "In [file] line [N]: [action]"
- If no line number, omit it
- No explanations, no headers, no markdown
- Maximum 10 words per action
- End with "Code only, no explanations"

EXAMPLE OUTPUT:
Fix PR comments:
- In UserService.cs line 45: add null check
- In UserService.cs line 78: use Include to avoid N+1
- In Modal.tsx: use useCallback for handleClick
Code only, no explanations"""
