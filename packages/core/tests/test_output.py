"""Tests for spec output cleaning and validation."""

import pytest

from adolens_core.output import (
    AC_PLACEHOLDER,
    BACKEND_KEYWORDS,
    UI_KEYWORDS,
    IssueKind,
    clean_backend_output,
    clean_frontend_output,
    filter_keywords,
    needs_retry,
    only_missing_ac,
    validate_backend_output,
    validate_frontend_output,
)

VALID_BACKEND = """Mutation:
- Name: CreateUser
- Input: record CreateUserInput(string Name)
- Returns: record CreateUserResult(Guid Id)

Behavior:
- Creates user in database

Rules:
- Name must be unique

AC: 1, 2"""

VALID_FRONTEND = """Component:
- Name: LoginFormComponent
- Type: form
- Location: Auth page

UI Elements:
- Username input
- Password input
- Submit button

States:
- Loading
- Error

Interactions:
- Click submit → validate

AC: 1, 2"""


class TestCleanBackendOutput:
    @pytest.mark.parametrize(
        "preamble",
        [
            "Here is the extracted spec:",
            "Here's your backend spec:",
            "The following is the mutation:",
            "Below is the spec:",
            "I've extracted the following:",
        ],
    )
    def test_removes_preamble(self, preamble):
        assert clean_backend_output(f"{preamble}\n\nMutation:") == "Mutation:"

    def test_removes_empty_code_block(self):
        assert clean_backend_output("```csharp\n```\nMutation:") == "Mutation:"

    def test_removes_fences_with_language(self):
        assert clean_backend_output("```csharp\nMutation:\n```") == "Mutation:"

    def test_removes_fences_without_language(self):
        assert clean_backend_output("```\nMutation:\n```") == "Mutation:"

    def test_filters_ui_lines(self):
        result = clean_backend_output("Mutation:\nUser clicks button\nStore in DB")
        assert "clicks button" not in result
        assert "Store in DB" in result

    def test_filters_case_insensitively(self):
        result = clean_backend_output("Mutation:\n- DISPLAY error\n- Store value")
        assert "DISPLAY" not in result
        assert "Store value" in result

    def test_database_line_survives_tab_keyword(self):
        result = clean_backend_output("Behavior:\n- Insert row into the database table\n- Switch tabs")
        assert "database table" in result
        assert "Switch tabs" not in result

    def test_preserves_valid_spec(self):
        assert clean_backend_output(VALID_BACKEND) == VALID_BACKEND


class TestCleanFrontendOutput:
    def test_removes_preamble_and_fences(self):
        assert clean_frontend_output("Here is the component:\n\nComponent:") == "Component:"
        assert clean_frontend_output("```typescript\nComponent:\n```") == "Component:"

    def test_filters_backend_lines(self):
        result = clean_frontend_output("Component:\nDatabase connection\nShow modal")
        assert "Database" not in result
        assert "modal" in result

    @pytest.mark.parametrize(
        "line",
        ["- SQL query result", "- Call repository", "- Uses Entity Framework", "- Add a migration"],
    )
    def test_filters_each_backend_term(self, line):
        result = clean_frontend_output(f"Behavior:\n{line}\n- Renders list")
        assert line not in result
        assert "Renders list" in result

    def test_preserves_valid_spec(self):
        assert clean_frontend_output(VALID_FRONTEND) == VALID_FRONTEND


class TestFilterKeywords:
    def test_no_keywords_only_trims(self):
        assert filter_keywords("  a\nb  ", []) == "a\nb"

    def test_suffixes(self):
        text = "clicked it\nclicking it\nclicks it\nclick it\nclickbait"
        assert filter_keywords(text, ["click"]) == "clickbait"

    def test_keyword_lists(self):
        assert {"button", "modal", "click", "tab"} <= set(UI_KEYWORDS)
        assert {"database", "sql", "repository"} <= set(BACKEND_KEYWORDS)


class TestValidateBackendOutput:
    def test_complete_spec_is_valid(self):
        result = validate_backend_output(VALID_BACKEND)
        assert result.is_valid
        assert result.issues == []

    @pytest.mark.parametrize(
        "removed, message",
        [
            ("Mutation:\n", 'Missing "Mutation:" section'),
            ("- Name: CreateUser\n", 'Missing "- Name:" in Mutation'),
            ("- Input: record CreateUserInput(string Name)\n", 'Missing "- Input:" in Mutation'),
            ("- Returns: record CreateUserResult(Guid Id)\n", 'Missing "- Returns:" in Mutation'),
            ("Behavior:\n", 'Missing "Behavior:" section'),
            ("Rules:\n", 'Missing "Rules:" section'),
        ],
    )
    def test_missing_sections(self, removed, message):
        result = validate_backend_output(VALID_BACKEND.replace(removed, ""))
        assert not result.is_valid
        assert message in result.messages

    def test_missing_ac(self):
        spec = VALID_BACKEND.replace("\n\nAC: 1, 2", "")
        assert validate_backend_output(spec).messages == ['Missing "AC:" section']

    @pytest.mark.parametrize("ending", ["Rules:\n-", "Behavior:", "- Input: record Test(string A,"])
    def test_truncation(self, ending):
        result = validate_backend_output(f"Mutation:\n- Name: Test\n{ending}")
        assert "Output appears to be truncated" in result.messages

    def test_incomplete_record(self):
        result = validate_backend_output("Mutation:\n- Name: Test\n- Input: record TestInput(string Name")
        assert "Incomplete record (missing closing parenthesis)" in result.messages
        assert any(i.kind is IssueKind.INCOMPLETE_CONSTRUCT for i in result.issues)

    def test_multiple_issues(self):
        assert len(validate_backend_output("Behavior:\n- Test").issues) > 1


class TestValidateFrontendOutput:
    def test_complete_spec_is_valid(self):
        assert validate_frontend_output(VALID_FRONTEND).is_valid

    def test_missing_component(self):
        spec = "- Name: Test\nUI Elements:\n- Button\nBehavior:\n- Click\nAC: 1"
        assert 'Missing "Component:" section' in validate_frontend_output(spec).messages

    def test_missing_name(self):
        spec = "Component:\n- Type: modal\nUI Elements:\n- Button\nBehavior:\n- Click\nAC: 1"
        assert 'Missing "- Name:" in Component' in validate_frontend_output(spec).messages

    def test_elements_alternative(self):
        spec = "Component:\n- Name: Test\nElements:\n- Button\nBehavior:\n- Click\nAC: 1"
        assert validate_frontend_output(spec).is_valid

    def test_missing_ui_elements(self):
        spec = "Component:\n- Name: Test\nBehavior:\n- Click\nAC: 1"
        assert validate_frontend_output(spec).messages == ['Missing "UI Elements:" section']

    def test_interactions_alternative(self):
        spec = "Component:\n- Name: Test\nUI Elements:\n- Button\nInteractions:\n- Click → action\nAC: 1"
        assert validate_frontend_output(spec).is_valid

    def test_missing_behavior(self):
        spec = "Component:\n- Name: Test\nUI Elements:\n- Button\nAC: 1"
        assert 'Missing "Behavior:" or "Interactions:" section' in validate_frontend_output(spec).messages

    def test_truncation(self):
        result = validate_frontend_output("Component:\n- Name: Test\n- Type:")
        assert "Output appears to be truncated" in result.messages


class TestRetryDecisions:
    def test_missing_ac_alone_is_patched_not_retried(self):
        result = validate_backend_output(VALID_BACKEND.replace("\n\nAC: 1, 2", ""))
        assert only_missing_ac(result)
        assert not needs_retry(result)
        assert validate_backend_output(VALID_BACKEND.replace("\n\nAC: 1, 2", "") + AC_PLACEHOLDER).is_valid

    def test_truncation_is_retried(self):
        result = validate_backend_output("Mutation:\n- Name: Test\nBehavior:")
        assert needs_retry(result)
        assert not only_missing_ac(result)

    def test_missing_sections_alone_are_not_retried(self):
        result = validate_backend_output("Behavior:\n- Test")
        assert not needs_retry(result)
        assert not only_missing_ac(result)
