"""task command — create a child Task for a user story."""

from __future__ import annotations

import click

from adolens_cli.console import POSITIVE_ID, command_errors, console, print_divider, print_header
from adolens_core.ado.client import AzureDevOpsClient, NotFoundError
from adolens_core.ado.work_items import STORY_TYPES, extract_fields, get_work_item_type
from adolens_core.generators import TASK_TAGS, TaskDraft, ensure_task_prefix, generate_task
from adolens_core.providers import get_provider

_TASK_CAUSES = (
    "User story does not exist",
    "PAT missing Work Items Read/Write permissions",
)


def _preview(draft: TaskDraft) -> None:
    print_divider()
    console.print(f"\n  Title: {draft.title}\n", markup=False)
    console.print("  Description:")
    for line in draft.description.split("\n"):
        console.print(f"  {line}", markup=False)
    console.print()
    print_divider()


def confirm_draft(draft: TaskDraft, kind: str) -> bool:
    """Show the draft until the user accepts (True) or cancels (False).

    "edit" replaces the title; a title without a [BE]/[FE] tag gets one.
    """
    while True:
        _preview(draft)
        answer = click.prompt("\n  Create task? (y/n/edit)", default="", show_default=False).strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        if answer == "edit":
            new_title = click.prompt(f"\n  New title (current: {draft.title})", default="", show_default=False)
            if new_title.strip():
                draft.title = ensure_task_prefix(new_title, kind)
            console.print()
        else:
            console.print("  Please answer y, n, or edit")


@click.command("task")
@click.argument("work_item_id", type=POSITIVE_ID)
@click.argument("kind", type=click.Choice(["be", "fe"], case_sensitive=False))
@click.pass_context
def task_cmd(ctx, work_item_id: int, kind: str):
    """Generate a [BE]/[FE] Task from a user story and create it as a child.

    The task is assigned to AZURE_USER_EMAIL, or to the PAT owner when unset.
    """
    kind = kind.lower()
    config = ctx.obj["config"]
    print_header("adolens task - Create Task from User Story")

    with command_errors(*_TASK_CAUSES):
        config.require_azure()
        client = AzureDevOpsClient.from_config(config)
        provider = get_provider(config)

        console.print(f"  Fetching US#{work_item_id}...")
        work_item = client.get_work_item_with_relations(work_item_id)
        if work_item is None:
            raise NotFoundError(f"Work item #{work_item_id} not found")

        item_type = get_work_item_type(work_item)
        if item_type not in STORY_TYPES:
            raise click.ClickException(f"Work item #{work_item_id} is a {item_type}, not a User Story/PBI/Bug")

        story = extract_fields(work_item)
        console.print(f'  "{story.title}"')

        assignee = config.azure_user_email or client.get_current_user()
        if assignee:
            console.print(f"  Will assign to: {assignee}")

        console.print(f"\n  Generating {TASK_TAGS[kind]} task...\n")
        draft = generate_task(provider, story, kind)

        if not confirm_draft(draft, kind):
            console.print("\n  Cancelled.\n")
            return

        console.print("\n  Creating task...")
        task = client.create_task(draft.title, draft.description, work_item_id, assignee)

    console.print(f"\n  [green]Task#{task['id']} created![/green]")
    console.print(f"  {client.work_item_url(task['id'])}\n")
