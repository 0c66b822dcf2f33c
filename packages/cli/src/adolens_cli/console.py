"""Shared terminal output for the commands."""

from __future__ import annotations

import logging
from contextlib import contextmanager

import click
from rich.console import Console

from adolens_core.ado.client import NotFoundError
from adolens_core.config import ConfigError

console = Console()
logger = logging.getLogger(__name__)

DIVIDER_WIDTH = 55

# Work item and pull request ids are positive integers; anything else is a usage error.
POSITIVE_ID = click.IntRange(min=1)

WORK_ITEM_CAUSES = (
    "Work Item does not exist",
    "PAT expired or missing permissions",
    "Incorrect project",
    "Invalid LLM API key",
)

PULL_REQUEST_CAUSES = (
    "PR does not exist",
    "PAT missing Code > Read permissions",
    "Incorrect repository",
)


def print_header(title: str) -> None:
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print()


def print_divider(width: int = DIVIDER_WIDTH) -> None:
    console.print("-" * width, markup=False, highlight=False)


def print_block(text: str) -> None:
    """Print LLM output between dividers, verbatim (no rich markup)."""
    print_divider()
    console.print(text, markup=False, highlight=False)
    print_divider()


@contextmanager
def command_errors(*causes: str):
    """Report any failure inside the block and exit 1.

    Click's own exceptions (usage errors, aborts, exits) pass through
    untouched so click can render them.
    """
    try:
        yield
    except (click.exceptions.ClickException, click.exceptions.Abort, click.exceptions.Exit):
        raise
    except ConfigError as e:
        console.print(f"  [red]{e}[/red]")
        raise SystemExit(1)
    except NotFoundError as e:
        console.print(f"  [red]Error: {e}[/red]")
        if e.available:
            console.print("\n  Available:")
            for name in e.available:
                console.print(f"    - {name}")
        raise SystemExit(1)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"  [red]Error: {e}[/red]")
        if causes:
            console.print("\n  Possible causes:")
            for cause in causes:
                console.print(f"    - {cause}")
        console.print()
        raise SystemExit(1)
