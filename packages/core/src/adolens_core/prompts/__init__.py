"""Prompt catalogue.

Review prompts are looked up by stack and by whether a user story is linked
to the pull request; the spec, check, task and fix prompts live in
``adolens_core.prompts.specs``.
"""

from __future__ import annotations

import enum

from adolens_core.prompts import backend, react_tailwind


class PromptKind(enum.Enum):
    BACKEND = "backend"
    REACT_TAILWIND = "react-tailwind"


_REVIEW_PROMPTS = {
    PromptKind.BACKEND: (backend.PROMPT_WITH_STORY, backend.PROMPT_NO_STORY),
    PromptKind.REACT_TAILWIND: (react_tailwind.PROMPT_WITH_STORY, react_tailwind.PROMPT_NO_STORY),
}

REVIEW_SYSTEM_PROMPT = (
    "You are a code reviewer. You MUST follow the exact output structure provided. "
    "Never skip sections. Always include all headers even if empty."
)


def get_review_prompt(kind: PromptKind | str, with_story: bool) -> str:
    """Return the review prompt for ``kind``.

    ``kind`` may be given as its config value (``"backend"``,
    ``"react-tailwind"``); an unknown value raises ``ValueError``.
    """
    kind = PromptKind(kind)
    with_us, no_us = _REVIEW_PROMPTS[kind]
    return with_us if with_story else no_us
