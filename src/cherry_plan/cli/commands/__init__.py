"""CLI command modules for cherry-plan."""

from __future__ import annotations

import typer

from . import plan


def register_commands(app: typer.Typer) -> None:
    """Attach every subcommand to ``app``."""
    app.command()(plan.make)
    app.command()(plan.pull)
    app.command()(plan.apply)
    app.command()(plan.mark)
    app.command()(plan.status)


__all__ = ["register_commands"]
