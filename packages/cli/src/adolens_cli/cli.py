"""CLI entry point for adolens.

Commands:
  spec    — compact backend/frontend spec from a user story
  check   — completeness report for a user story, with optional Figma context
  task    — generate and create a child Task under a user story
  fix     — turn pending PR comments into a minimal fix prompt
  review  — AI review of the changed lines of a pull request
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from adolens_cli.commands.check import check_cmd
from adolens_cli.commands.fix import fix_cmd
from adolens_cli.commands.review import review_cmd
from adolens_cli.commands.spec import spec_cmd
from adolens_cli.commands.task import task_cmd


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    if verbose:
        # SDK and urllib3 debug output drowns ours.
        for noisy in ("urllib3", "httpx", "httpcore", "openai", "anthropic"):
            logging.getLogger(noisy).setLevel(logging.INFO)


@click.group()
@click.version_option(
    version=importlib.metadata.version("adolens"),
    prog_name="adolens",
)
@click.option(
    "--config",
    "config_path",
    default=".adolens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="ADOLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Azure DevOps work items and pull requests, distilled into AI prompts."""
    from adolens_core.config import load_config

    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)


main.add_command(spec_cmd)
main.add_command(check_cmd)
main.add_command(task_cmd)
main.add_command(fix_cmd)
main.add_command(review_cmd)
