"""Work item projections and hierarchy lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from adolens_core.ado.client import PARENT_RELATION
from adolens_core.utils.html import strip_html_structured, strip_html_to_lines, strip_html_to_text

logger = logging.getLogger(__name__)

TITLE_FIELD = "System.Title"
DESCRIPTION_FIELD = "System.Description"
ACCEPTANCE_CRITERIA_FIELD = "Microsoft.VSTS.Common.AcceptanceCriteria"
TYPE_FIELD = "System.WorkItemType"

USER_STORY = "User Story"
PRODUCT_BACKLOG_ITEM = "Product Backlog Item"
BUG = "Bug"
TASK = "Task"

STORY_TYPES = (USER_STORY, PRODUCT_BACKLOG_ITEM, BUG)

_MAX_PARENT_DEPTH = 5


@dataclass(frozen=True)
class WorkItemSummary:
    id: int | None
    title: str
    description: str
    acceptance_criteria: str


def _fields(work_item: dict) -> dict:
    return work_item.get("fields") or {}


def extract_fields(work_item: dict) -> WorkItemSummary:
    """Project a raw work item onto title, one-line description and AC lines."""
    f = _fields(work_item)
    return WorkItemSummary(
        id=work_item.get("id"),
        title=f.get(TITLE_FIELD) or "",
        description=strip_html_to_text(f.get(DESCRIPTION_FIELD)),
        acceptance_criteria=strip_html_to_lines(f.get(ACCEPTANCE_CRITERIA_FIELD)),
    )


def extract_fields_structured(work_item: dict) -> WorkItemSummary:
    """Like :func:`extract_fields`, but keeps paragraph breaks in the description."""
    f = _fields(work_item)
    return WorkItemSummary(
        id=work_item.get("id"),
        title=f.get(TITLE_FIELD) or "",
        description=strip_html_structured(f.get(DESCRIPTION_FIELD)),
        acceptance_criteria=strip_html_to_lines(f.get(ACCEPTANCE_CRITERIA_FIELD)),
    )


def get_work_item_type(work_item: dict) -> str:
    return _fields(work_item).get(TYPE_FIELD) or ""


def is_story_type(work_item: dict) -> bool:
    return get_work_item_type(work_item) in STORY_TYPES


def _parent_id(work_item: dict) -> str | None:
    for relation in work_item.get("relations") or []:
        if relation.get("rel") == PARENT_RELATION:
            url = relation.get("url") or ""
            return url.rstrip("/").rsplit("/", 1)[-1] or None
    return None


def find_parent_story(client, work_item: dict, max_depth: int = _MAX_PARENT_DEPTH) -> dict | None:
    """Walk up the parent links until a story-type ancestor is found.

    Tasks can be nested under other tasks, so intermediate Task parents are
    followed. Any other parent type ends the search. The walk stops after
    ``max_depth`` hops or when an id repeats.
    """
    visited: set[str] = set()
    if work_item.get("id") is not None:
        visited.add(str(work_item["id"]))

    current = work_item
    for _ in range(max_depth):
        parent_id = _parent_id(current)
        if parent_id is None:
            return None
        if parent_id in visited:
            logger.warning("Cycle in work item hierarchy at #%s", parent_id)
            return None
        visited.add(parent_id)

        parent = client.get_work_item_with_relations(parent_id)
        if parent is None:
            return None

        parent_type = get_work_item_type(parent)
        if parent_type in STORY_TYPES:
            return parent
        if parent_type != TASK:
            return None
        current = parent

    logger.debug("Parent lookup gave up after %d levels", max_depth)
    return None


def resolve_linked_story(client, linked_items: list[dict]) -> dict | None:
    """Return the first story-type work item among those linked to a pull request.

    Linked Tasks are resolved to their parent story.
    """
    for ref in linked_items:
        item_id = ref.get("id") or (ref.get("url") or "").rstrip("/").rsplit("/", 1)[-1]
        if not item_id:
            continue
        item = client.get_work_item_with_relations(item_id)
        if item is None:
            continue
        if is_story_type(item):
            return item
        if get_work_item_type(item) == TASK:
            parent = find_parent_story(client, item)
            if parent is not None:
                return parent
    return None
