"""Reusable UI helpers for cherry-plan CLI output."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from rich.table import Table
from rich.tree import Tree

from cherry_plan.plan import PlanSummary, Verb

_STEP_SYMBOLS = {
    "pending": "[green dim]○[/green dim]",
    "running": "[cyan]○[/cyan]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


@dataclass
class Step:
    """One cherry-pick shown by the tracker."""

    label: str
    status: str = "pending"
    detail: str = ""


class StepTracker:
    """Progress of an apply run, one tree node per pick.

    Steps are keyed by position in the plan, so the same commit listed twice
    gets two nodes. An attached refresh callback (typically ``Live.update``)
    runs after every change.
    """

    def __init__(self, title: str):
        self.title = title
        self.steps: dict[str, Step] = {}
        self._refresh_cb: Callable[[], None] | None = None

    def attach_refresh(self, cb: Callable[[], None]) -> None:
        self._refresh_cb = cb

    def add(self, key: str, label: str) -> None:
        if key not in self.steps:
            self.steps[key] = Step(label)
            self._maybe_refresh()

    def start(self, key: str, detail: str = "") -> None:
        self._update(key, "running", detail)

    def complete(self, key: str, detail: str = "") -> None:
        self._update(key, "done", detail)

    def error(self, key: str, detail: str = "") -> None:
        self._update(key, "error", detail)

    def skip_pending(self, detail: str) -> None:
        """Mark every step that never started as skipped."""
        for step in self.steps.values():
            if step.status == "pending":
                step.status = "skipped"
                step.detail = detail
        self._maybe_refresh()

    def _update(self, key: str, status: str, detail: str) -> None:
        step = self.steps[key]
        step.status = status
        if detail:
            step.detail = detail
        self._maybe_refresh()

    def _maybe_refresh(self) -> None:
        if self._refresh_cb:
            self._refresh_cb()

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps.values():
            symbol = _STEP_SYMBOLS.get(step.status, " ")
            detail = f" [bright_black]({step.detail.strip()})[/bright_black]" if step.detail.strip() else ""
            if step.status == "pending":
                tree.add(f"{symbol} [bright_black]{step.label}[/bright_black]{detail}")
            else:
                tree.add(f"{symbol} [white]{step.label}[/white]{detail}")
        return tree


_VERB_STYLES = {
    Verb.PICK: "green",
    Verb.DROP: "red",
    Verb.NOOP: "dim",
    Verb.UNDECIDED: "yellow",
}


def summary_table(summary: PlanSummary, path_display: str) -> Table:
    """Build a Rich table describing a plan."""
    header = summary.header
    table = Table(title=f"Plan {path_display}", show_lines=False)
    table.add_column("Verb", style="bold")
    table.add_column("Commits", justify="right")
    for verb in Verb:
        color = _VERB_STYLES[verb]
        table.add_row(f"[{color}]{verb.label}[/{color}]", str(summary.counts.get(verb, 0)))
    table.add_row("[bold]total[/bold]", f"[bold]{summary.total}[/bold]")
    if header is not None:
        table.caption = f"branch {header.branch or '?'} onto {header.onto} (tip {header.tip})"
    return table


__all__ = ["StepTracker", "summary_table"]
