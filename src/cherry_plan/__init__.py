"""
cherry-plan - manage ordered cherry-pick plans between git branches.

Usage:
    git-cherry-plan make <branch> [<limit> [<file>]]
    git-cherry-plan pull <branch> [<file>]
    git-cherry-plan mark [<file>]
    git-cherry-plan apply [<file>]
"""

from __future__ import annotations

import logging

import typer

from cherry_plan.cli.commands import register_commands
from cherry_plan.core.utils import setup_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="git-cherry-plan",
    help="Plan, track and apply ordered cherry-picks from another branch.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cherry-plan {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git commands and plan decisions"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Plan, track and apply ordered cherry-picks from another branch."""
    if verbose:
        setup_logging(logging.DEBUG)


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
