"""Plan commands: make, pull, mark, apply and status."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer
from rich.live import Live
from rich.markup import escape

from cherry_plan.cli.helpers import console, get_store, print_error
from cherry_plan.cli.ui import StepTracker, summary_table
from cherry_plan.core.config import ConfigError
from cherry_plan.core.utils import format_path
from cherry_plan.core.vcs import VCSError
from cherry_plan.plan import ApplyFailure, PlanError, PlanResolveError, PlanStore, Verb

T = TypeVar("T")

FILE_HELP = "Plan file (default: <plan dir>/<current branch>.plan)"


def _run_or_exit(fn: Callable[[], T]) -> T:
    try:
        return fn()
    except (PlanError, VCSError, ConfigError) as exc:
        print_error(str(exc))
        raise typer.Exit(1) from exc


def _store() -> PlanStore:
    return _run_or_exit(get_store)


def _display(path: Path) -> str:
    return escape(format_path(path, Path.cwd()))


def make(
    branch: str = typer.Argument(..., help="Branch to take commits from"),
    limit: str = typer.Argument("HEAD", help="Leave out commits reachable from this revision"),
    file: Optional[Path] = typer.Argument(None, help=FILE_HELP),
) -> None:
    """Create a new plan listing the commits in LIMIT..BRANCH."""
    store = _store()
    path = _run_or_exit(lambda: store.make(branch, limit, file))
    summary = _run_or_exit(lambda: store.status(path))

    noop = summary.counts.get(Verb.NOOP, 0)
    detail = f" ({noop} already applied)" if noop else ""
    console.print(f"[green]Created[/green] {_display(path)}: {summary.total} commit(s){detail}")


def pull(
    branch: str = typer.Argument(..., help="Branch to take new commits from"),
    file: Optional[Path] = typer.Argument(None, help=FILE_HELP),
) -> None:
    """Append commits that landed on BRANCH since the plan was last updated."""
    store = _store()
    added = _run_or_exit(lambda: store.pull(branch, file))

    for action in added:
        typer.echo(action.render())
    if added:
        console.print(f"[green]Appended[/green] {len(added)} commit(s)")
    else:
        console.print("[dim]Plan is up to date[/dim]")


def mark(
    file: Optional[Path] = typer.Argument(None, help=FILE_HELP),
    branch: Optional[str] = typer.Option(
        None,
        "--branch",
        "-b",
        help="Source branch (default: the branch recorded in the plan header)",
    ),
) -> None:
    """Refresh noop markers for commits already cherry-picked onto HEAD."""
    store = _store()
    noops = _run_or_exit(lambda: store.mark(file, branch))
    console.print(f"{len(noops)} commit(s) marked noop")


def apply(
    file: Optional[Path] = typer.Argument(None, help=FILE_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be picked without cherry-picking"),
) -> None:
    """Cherry-pick every pick line of the plan, in order, stopping at the first failure."""
    store = _store()
    plan = _run_or_exit(lambda: store.load(file))
    picks = [action for action in plan.actions if action.verb is Verb.PICK]
    if not picks:
        console.print("[yellow]No pick lines in plan; nothing to apply.[/yellow]")
        return

    tracker = StepTracker("Apply plan" + (" (dry run)" if dry_run else ""))
    for index, action in enumerate(picks):
        tracker.add(str(index), f"{action.commit} {escape(action.subject)}")

    if dry_run:
        result = _run_or_exit(lambda: store.apply(file, dry_run=True))
        tracker.skip_pending("dry run")
        console.print(tracker.render())
        console.print(f"{len(result.picks)} commit(s) would be cherry-picked")
        return

    positions = iter(range(len(picks)))
    running = ""

    def _on_start(_action) -> None:
        nonlocal running
        running = str(next(positions))
        tracker.start(running)

    def _on_applied(_action) -> None:
        tracker.complete(running)

    try:
        with Live(tracker.render(), console=console, refresh_per_second=8, transient=True) as live:
            tracker.attach_refresh(lambda: live.update(tracker.render()))
            result = store.apply(file, on_start=_on_start, on_applied=_on_applied)
    except ApplyFailure as exc:
        tracker.error(running, "cherry-pick failed")
        tracker.skip_pending("not attempted")
        console.print(tracker.render())
        print_error(str(exc), exc.detail)
        console.print(
            "Resolve the cherry-pick (git cherry-pick --continue or --abort), "
            "run 'mark' to refresh the plan, then apply again."
        )
        raise typer.Exit(1) from exc
    except PlanResolveError as exc:
        print_error(str(exc), "Nothing was applied.")
        raise typer.Exit(1) from exc
    except (PlanError, VCSError) as exc:
        print_error(str(exc))
        raise typer.Exit(1) from exc

    console.print(tracker.render())
    console.print(f"[green]Applied[/green] {len(result.applied)} commit(s)")


def status(
    file: Optional[Path] = typer.Argument(None, help=FILE_HELP),
) -> None:
    """Summarise a plan: verb counts, source branch and reference point."""
    store = _store()
    summary = _run_or_exit(lambda: store.status(file))
    console.print(summary_table(summary, _display(summary.path)))


__all__ = ["make", "pull", "mark", "apply", "status"]
