"""Shared console and store construction for CLI commands."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from cherry_plan.core.vcs import get_vcs
from cherry_plan.plan import PlanStore

console = Console()


def get_store(cwd: Path | None = None) -> PlanStore:
    """Build a PlanStore for the repository containing ``cwd``.

    Raises:
        VCSNotFoundError: git is missing or ``cwd`` is not inside a repository.
        ConfigError: The plan configuration is invalid.
    """
    return PlanStore.from_config(get_vcs(cwd or Path.cwd()))


def print_error(message: str, detail: str | None = None) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    if detail:
        console.print(f"[dim]{escape(detail)}[/dim]", highlight=False)


__all__ = ["console", "get_store", "print_error"]
