"""fix command — pending PR comments into a minimal fix prompt."""

from __future__ import annotations

import click

from adolens_cli.clipboard import copy_to_clipboard
from adolens_cli.console import (
    POSITIVE_ID,
    PULL_REQUEST_CAUSES,
    command_errors,
    console,
    print_block,
    print_header,
)
from adolens_core.ado.client import AzureDevOpsClient, NotFoundError
from adolens_core.ado.threads import ThreadPolicy, extract_pending_comments
from adolens_core.generators import generate_fix_prompt
from adolens_core.http import HttpError
from adolens_core.providers import get_provider


@click.command("fix")
@click.argument("pr_id", type=POSITIVE_ID)
@click.option("--repo", "repo_name", default=None, help="Repository name. Defaults to AZURE_REPO, then the first repo.")
@click.option(
    "--policy",
    type=click.Choice([p.value for p in ThreadPolicy]),
    default=ThreadPolicy.ACTIVE_ONLY.value,
    show_default=True,
    help="Which threads count as pending: only active ones, or everything not fixed/closed.",
)
@click.pass_context
def fix_cmd(ctx, pr_id: int, repo_name: str | None, policy: str):
    """Turn pending review comments on a pull request into a prompt for Cursor."""
    config = ctx.obj["config"]
    print_header("adolens fix - Optimized prompt from PR comments")

    with command_errors(*PULL_REQUEST_CAUSES):
        config.require_azure()
        client = AzureDevOpsClient.from_config(config)
        provider = get_provider(config)

        console.print("  Fetching repository...")
        repo = client.require_repository(repo_name or config.azure_repo)
        console.print(f"  Repo: {repo['name']}")

        console.print(f"  Fetching PR #{pr_id}...")
        try:
            pr = client.get_pull_request(repo["id"], pr_id)
        except HttpError as e:
            if e.status_code == 404:
                raise NotFoundError(f"PR #{pr_id} not found in {repo['name']}.")
            raise
        console.print(f'  "{pr.get("title") or ""}"')

        console.print("  Fetching comments...")
        comments = extract_pending_comments(client.get_threads(repo["id"], pr_id), ThreadPolicy(policy))
        console.print(f"  Pending comments: {len(comments)}")

        if not comments:
            console.print("\n  [green]No pending comments. All resolved![/green]\n")
            return

        console.print("  Generating optimized prompt...\n")
        prompt = generate_fix_prompt(provider, comments)

    print_block(prompt)
    if copy_to_clipboard(prompt):
        console.print("\n  [green]Prompt copied to clipboard![/green]")
    else:
        console.print("\n  [yellow]Clipboard unavailable. Copy the prompt above.[/yellow]")
    console.print("  Paste in Cursor (Ctrl+V) and press Enter\n")
