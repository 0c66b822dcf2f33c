"""check command — is a user story complete enough to build?"""

from __future__ import annotations

import click

from adolens_cli.clipboard import copy_to_clipboard
from adolens_cli.console import (
    POSITIVE_ID,
    WORK_ITEM_CAUSES,
    command_errors,
    console,
    print_divider,
    print_header,
)
from adolens_core.ado.client import AzureDevOpsClient
from adolens_core.ado.work_items import extract_fields_structured
from adolens_core.figma import fetch_figma_content, is_figma_url
from adolens_core.generators import analyze_story
from adolens_core.providers import get_provider


def collect_figma_context(figma_pat: str | None) -> str:
    """Ask for Figma links or free-text screen descriptions, one per line.

    An empty line ends the input. Links are fetched and summarised when a
    token is configured; otherwise they are passed on as-is.
    """
    console.print("\n  FIGMA CONTEXT (optional)\n")
    console.print("  You can provide Figma links or descriptions.")
    if figma_pat:
        console.print("  FIGMA_PAT detected - URLs will be fetched automatically")
    else:
        console.print("  No FIGMA_PAT - URLs will be passed as-is")
    console.print("  Press Enter after each one. Empty line to finish.\n")

    screens: list[str] = []
    index = 1
    while True:
        try:
            entry = click.prompt(f"  Figma #{index}", default="", show_default=False).strip()
        except click.exceptions.Abort:
            console.print("  [yellow]Could not read Figma input, continuing without it...[/yellow]")
            break
        if not entry:
            break

        if is_figma_url(entry):
            console.print("     Fetching Figma content...")
            content = fetch_figma_content(entry, figma_pat)
            if content.success:
                console.print("     [green]Extracted content from Figma[/green]")
                screens.append(f"[Screen {index}]\nURL: {entry}\n{content.summary}")
            else:
                console.print(f"     [yellow]{content.error} - using URL as description[/yellow]")
                screens.append(f"[Screen {index}] {content.fallback}")
        else:
            screens.append(f"[Screen {index}] {entry}")
        index += 1

    return "\n\n".join(screens)


@click.command("check")
@click.argument("work_item_id", type=POSITIVE_ID)
@click.pass_context
def check_cmd(ctx, work_item_id: int):
    """Validate that a user story is complete and suggest missing ACs.

    \b
    Optional environment variables:
      FIGMA_PAT            Figma token; pasted Figma links are summarised
    """
    config = ctx.obj["config"]
    print_header("adolens check - Validate User Story completeness")

    with command_errors(*WORK_ITEM_CAUSES):
        config.require_azure()
        client = AzureDevOpsClient.from_config(config)
        provider = get_provider(config)

        console.print(f"  Fetching US #{work_item_id} from Azure DevOps...")
        story = extract_fields_structured(client.get_work_item(work_item_id))
        console.print(f'  "{story.title}"\n')
        print_divider()

        figma_context = collect_figma_context(config.figma_pat)

        console.print("\n  Analyzing User Story...\n")
        report = analyze_story(provider, story, figma_context)

    if copy_to_clipboard(report):
        console.print("  [green]Analysis completed! (copied to clipboard)[/green]")
    else:
        console.print("  Analysis completed!")
        console.print("  [yellow]Clipboard unavailable. Output printed below.[/yellow]")

    console.print()
    print_divider()
    console.print()
    console.print(report, markup=False, highlight=False)
    console.print()
    print_divider()
    console.print("\n  Tip: Copy suggested ACs to Product Owner\n")
