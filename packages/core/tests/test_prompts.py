"""Tests for the review prompt catalogue."""

import pytest

from adolens_core.prompts import PromptKind, get_review_prompt


@pytest.mark.parametrize("kind", list(PromptKind))
class TestReviewPrompts:
    def test_story_variant_has_ac_table(self, kind):
        prompt = get_review_prompt(kind, with_story=True)
        assert "### AC Coverage" in prompt
        assert "No US linked" not in prompt

    def test_no_story_variant(self, kind):
        prompt = get_review_prompt(kind, with_story=False)
        assert prompt.endswith("No US linked")
        assert "AC Coverage" not in prompt

    def test_shared_structure(self, kind):
        prompt = get_review_prompt(kind, with_story=True)
        assert "CRITICAL BUGS RULES" in prompt
        assert "| Severity | Category | File | Line | Issue | Fix |" in prompt
        assert "*adolens review*" in prompt

    def test_lookup_by_config_value(self, kind):
        assert get_review_prompt(kind.value, True) == get_review_prompt(kind, True)


def test_stacks_differ():
    assert get_review_prompt("backend", True) != get_review_prompt("react-tailwind", True)
    assert "UserProfile.tsx" in get_review_prompt("react-tailwind", False)


def test_unknown_stack():
    with pytest.raises(ValueError):
        get_review_prompt("cobol", True)
