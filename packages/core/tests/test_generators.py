"""Tests for the spec, check, task and fix generators."""

from unittest.mock import MagicMock

import pytest

from adolens_core.ado.threads import PendingComment
from adolens_core.ado.work_items import WorkItemSummary
from adolens_core.generators import (
    TaskDraft,
    analyze_story,
    build_check_message,
    build_spec_message,
    build_task_message,
    compile_spec,
    ensure_task_prefix,
    generate_fix_prompt,
    generate_task,
    parse_task_output,
)
from adolens_core.prompts import specs

STORY = WorkItemSummary(
    id=42,
    title="Export orders",
    description="Users export their orders as CSV",
    acceptance_criteria="1. CSV download\n2. Max 10k rows",
)

BACKEND_SPEC = """Mutation:
- Name: ExportOrders
- Input: record ExportOrdersInput(Guid UserId)
- Returns: record ExportOrdersResult(string Url)

Behavior:
- Query orders for the user

Rules:
- At most 10k rows

AC: 1, 2"""


def _provider(*replies):
    provider = MagicMock()
    provider.complete.side_effect = list(replies)
    return provider


class TestCompileSpec:
    def test_valid_on_first_attempt(self):
        provider = _provider(f"Here is the spec:\n\n```\n{BACKEND_SPEC}\n```")
        result = compile_spec(provider, STORY, "be")

        assert result.text == BACKEND_SPEC
        assert result.validation.is_valid
        assert result.attempts == 1
        kwargs = provider.complete.call_args.kwargs
        assert kwargs["max_tokens"] == 300
        assert kwargs["temperature"] == 0.05

    def test_missing_ac_is_patched(self):
        provider = _provider(BACKEND_SPEC.replace("\n\nAC: 1, 2", ""))
        result = compile_spec(provider, STORY)
        assert result.text.endswith("AC: (verify manually)")
        assert provider.complete.call_count == 1

    def test_truncated_output_retried_once(self):
        provider = _provider("Mutation:\n- Name: ExportOrders\n- Input:", BACKEND_SPEC)
        result = compile_spec(provider, STORY)
        assert result.attempts == 2
        assert result.validation.is_valid

    def test_gives_up_after_second_attempt(self):
        truncated = "Mutation:\n- Name: ExportOrders\n- Input:"
        provider = _provider(truncated, truncated, BACKEND_SPEC)
        result = compile_spec(provider, STORY)
        assert provider.complete.call_count == 2
        assert not result.validation.is_valid

    def test_missing_sections_not_retried(self):
        provider = _provider("Behavior:\n- Query orders")
        result = compile_spec(provider, STORY)
        assert provider.complete.call_count == 1
        assert 'Missing "Mutation:" section' in result.validation.messages

    def test_frontend_strips_backend_lines(self):
        spec = (
            "Component:\n- Name: OrdersExport\n\nUI Elements:\n- Export button\n- Stored in database\n\n"
            "Behavior:\n- Click export downloads CSV\n\nAC: 1"
        )
        provider = _provider(spec)
        result = compile_spec(provider, STORY, "fe")
        assert "database" not in result.text
        assert "Export button" in result.text
        assert provider.complete.call_args.kwargs["max_tokens"] == 350

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            compile_spec(_provider(), STORY, "db")

    def test_message_contains_story(self):
        message = build_spec_message(specs.BACKEND_SPEC_PROMPT, STORY)
        assert message.startswith(specs.BACKEND_SPEC_PROMPT)
        assert "Title: Export orders" in message
        assert "Acceptance Criteria: 1. CSV download" in message


class TestAnalyzeStory:
    def test_figma_context_substituted(self):
        message = build_check_message(STORY, "[Screen 1] Checkout")
        assert "[Screen 1] Checkout" in message
        assert "{FIGMA_CONTEXT}" not in message

    def test_without_figma(self):
        assert specs.NO_FIGMA_CONTEXT in build_check_message(STORY, None)

    def test_placeholders_for_empty_story(self):
        message = build_check_message(WorkItemSummary(1, "T", "", ""), None)
        assert "(No description)" in message
        assert "(No acceptance criteria)" in message

    def test_budget(self):
        provider = _provider("## Completeness Score: 8/10")
        assert analyze_story(provider, STORY) == "## Completeness Score: 8/10"
        kwargs = provider.complete.call_args.kwargs
        assert (kwargs["max_tokens"], kwargs["temperature"]) == (1500, 0.2)


class TestTasks:
    def test_parse_output(self):
        output = "Title: [BE] Add export endpoint\n\nDescription:\n- Add query\n- Add DTO\nNote: ignore me\n- Add tests"
        assert parse_task_output(output) == TaskDraft("[BE] Add export endpoint", "- Add query\n- Add DTO\n- Add tests")

    def test_parse_without_description(self):
        assert parse_task_output("Title: Something") == TaskDraft("Something", "")
        assert parse_task_output("") == TaskDraft("", "")

    def test_generate_uses_role_prompt(self):
        provider = _provider("Title: [FE] Export button\nDescription:\n- Add button")
        draft = generate_task(provider, STORY, "fe")

        assert draft.title == "[FE] Export button"
        kwargs = provider.complete.call_args.kwargs
        assert kwargs["system_prompt"] == "You are a Frontend tech lead. Generate clear, actionable tasks."
        assert (kwargs["max_tokens"], kwargs["temperature"]) == (800, 0.3)
        message = provider.complete.call_args.args[0]
        assert message.startswith(specs.FRONTEND_TASK_PROMPT)
        assert "User Story #42: Export orders" in message

    def test_backend_message(self):
        assert build_task_message(STORY, "be").startswith(specs.BACKEND_TASK_PROMPT)

    @pytest.mark.parametrize(
        "title, kind, expected",
        [
            ("Add endpoint", "be", "[BE] Add endpoint"),
            ("  Add button ", "fe", "[FE] Add button"),
            ("[BE] Already tagged", "be", "[BE] Already tagged"),
            ("[FE] Other tag kept", "be", "[FE] Other tag kept"),
        ],
    )
    def test_ensure_prefix(self, title, kind, expected):
        assert ensure_task_prefix(title, kind) == expected


class TestFixPrompt:
    def test_no_comments(self):
        provider = _provider()
        assert generate_fix_prompt(provider, []) is None
        provider.complete.assert_not_called()

    def test_comments_formatted(self):
        provider = _provider("Fix PR comments:\n- In A.cs line 3: add null check\nCode only, no explanations")
        result = generate_fix_prompt(provider, [PendingComment("/src/A.cs", 3, "null check please")])

        assert result.startswith("Fix PR comments:")
        message = provider.complete.call_args.args[0]
        assert message.startswith(specs.FIX_PROMPT)
        assert 'PR COMMENTS:\n- /src/A.cs line 3: "null check please"' in message
        kwargs = provider.complete.call_args.kwargs
        assert (kwargs["max_tokens"], kwargs["temperature"]) == (300, 0.05)
