"""spec command — compact backend or frontend spec from a user story."""

from __future__ import annotations

import click

from adolens_cli.clipboard import copy_to_clipboard
from adolens_cli.console import POSITIVE_ID, WORK_ITEM_CAUSES, command_errors, console, print_block, print_header
from adolens_core.ado.client import AzureDevOpsClient
from adolens_core.ado.work_items import extract_fields
from adolens_core.generators import BACKEND, compile_spec
from adolens_core.providers import get_provider

_TITLES = {
    "be": "adolens spec - Azure DevOps -> HotChocolate (Backend)",
    "fe": "adolens spec - Azure DevOps -> Frontend (UI/Components)",
}


@click.command("spec")
@click.argument("work_item_id", type=POSITIVE_ID)
@click.argument("kind", type=click.Choice(["be", "fe"], case_sensitive=False), default=BACKEND)
@click.pass_context
def spec_cmd(ctx, work_item_id: int, kind: str):
    """Extract a compact spec from a user story and copy it to the clipboard.

    KIND is "be" (one backend mutation, the default) or "fe" (one UI component).

    \b
    Required environment variables:
      AZURE_ORG, AZURE_PROJECT, AZURE_PAT
      GROQ_API_KEY         (or the key for the configured provider)
    """
    kind = kind.lower()
    config = ctx.obj["config"]
    print_header(_TITLES[kind])

    with command_errors(*WORK_ITEM_CAUSES):
        config.require_azure()
        client = AzureDevOpsClient.from_config(config)
        provider = get_provider(config)

        console.print(f"  Fetching US #{work_item_id} from Azure DevOps...")
        story = extract_fields(client.get_work_item(work_item_id))
        console.print(f'  "{story.title}"')
        console.print(f"  Extracting {'backend' if kind == BACKEND else 'frontend'} spec...\n")

        result = compile_spec(provider, story, kind)

    if copy_to_clipboard(result.text):
        console.print("  [green]Spec copied to clipboard![/green]")
    else:
        console.print("  [yellow]Clipboard unavailable. Output printed below.[/yellow]")

    if not result.validation.is_valid:
        console.print("\n  [yellow]Warnings:[/yellow]")
        for message in result.validation.messages:
            console.print(f"     - {message}")

    console.print()
    print_block(result.text)
    console.print("\n  Paste in Cursor Chat (Ctrl+V) and press Enter\n")
