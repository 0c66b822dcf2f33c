"""review command — AI review of the changed lines of a pull request."""

from __future__ import annotations

import click

from adolens_cli.clipboard import copy_to_clipboard
from adolens_cli.console import POSITIVE_ID, command_errors, console, print_block, print_header
from adolens_core.ado.client import AzureDevOpsClient
from adolens_core.prompts import PromptKind
from adolens_core.providers import get_provider
from adolens_core.review import publish_review
from adolens_core.reviewer import run_review

_REVIEW_CAUSES = (
    "PR does not exist",
    "PAT missing Code > Read/Write permissions",
    "Incorrect repository",
)


@click.command("review")
@click.argument("pr_id", type=POSITIVE_ID)
@click.option("--repo", "repo_name", default=None, help="Repository name. Defaults to AZURE_REPO, then the first repo.")
@click.option(
    "--stack",
    type=click.Choice([k.value for k in PromptKind]),
    default=None,
    help="Review rules to apply. Overrides review_stack in the config file.",
)
@click.option("--yes", "-y", is_flag=True, help="Publish without asking.")
@click.option("--no-publish", "no_publish", is_flag=True, help="Never publish; print and copy only.")
@click.pass_context
def review_cmd(ctx, pr_id: int, repo_name: str | None, stack: str | None, yes: bool, no_publish: bool):
    """Review only the changed lines of a pull request.

    CRITICAL (bugs/security) > IMPORTANT (perf/clean) > MINOR (practices).
    The review can be published back to the PR as a general thread plus one
    line comment per issue.
    """
    config = ctx.obj["config"]
    print_header("adolens review - AI Code Review (Changes Only)")

    with command_errors(*_REVIEW_CAUSES):
        config.require_azure()
        client = AzureDevOpsClient.from_config(config)
        provider = get_provider(config)

        console.print("  Fetching PR...")
        result = run_review(client, provider, pr_id, config, repo_name=repo_name, stack=stack)
        if result is None:
            console.print()
            return

        console.print()
        print_block(result.text)
        if copy_to_clipboard(result.text):
            console.print("\n  [green]Copied to clipboard![/green]\n")
        else:
            console.print("\n  [yellow]Clipboard unavailable. Copy the review above.[/yellow]\n")

        if no_publish:
            console.print("  Not published (--no-publish).\n")
            return
        if not yes and not click.confirm("  Publish to PR?", default=False):
            console.print("\n  Not published. Use clipboard.\n")
            return

        console.print("\n  Publishing...")
        published = publish_review(
            client, result.repo["id"], pr_id, result.text, result.changes, result.iteration_id
        )

    console.print(
        f"\n  [green]Review published![/green] {published.posted} line comment(s)"
        + (f", {published.skipped} skipped" if published.skipped else "")
    )
    console.print(f"  {client.pull_request_url(result.repo['name'], pr_id)}\n")
