"""Line codec for plan files.

A plan is a list of entries. An entry is either a ``CommitAction``
(``pick``/``drop``/``noop``/undecided plus an abbreviated hash and subject)
or an opaque line (comment, blank, anything unrecognised) kept verbatim.
An undecided line has no verb and must be indented, so unindented free text
is never read as a commit.

The header block is appended at the end of the file::

    # Rebase 1a2b3c4..5d6e7f8 onto 1a2b3c4 (3 commands)
    # Branch: feature/login
    #
    # Commands:
    # ...

Only the last ``Rebase`` and ``Branch`` lines in a file count.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union


class Verb(str, Enum):
    """What to do with a commit when the plan is applied."""

    PICK = "pick"
    DROP = "drop"
    NOOP = "noop"
    UNDECIDED = ""

    @property
    def label(self) -> str:
        return self.value or "undecided"


_ACTION_RE = re.compile(
    r"^(?:(?P<verb>pick|drop|noop) +| +)(?P<commit>[0-9a-fA-F]{4,64})(?: (?P<subject>.*))?$"
)
_REBASE_RE = re.compile(
    r"^# Rebase (?P<start>[0-9a-f]+)\.\.(?P<tip>[0-9a-f]+) onto (?P<onto>[0-9a-f]+) "
    r"\((?P<count>\d+) commands?\)\s*$"
)
_BRANCH_RE = re.compile(r"^# Branch: (?P<branch>\S+)\s*$")

FOOTER = (
    "# Commands:",
    "# pick <commit> = cherry-pick the commit onto the current branch",
    "# drop <commit> = leave the commit out",
    "# noop <commit> = already applied (maintained by mark)",
    "#      <commit> = undecided, not applied",
    "#",
    "# Lines are applied from top to bottom; do not reorder them.",
    "# Lines starting with '#' are ignored.",
)


@dataclass(frozen=True)
class CommitAction:
    """One commit line of a plan."""

    verb: Verb
    commit: str
    subject: str = ""
    raw: str | None = None

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        line = f"{self.verb.value:<4} {self.commit}"
        return f"{line} {self.subject}" if self.subject else line

    def with_verb(self, verb: Verb) -> "CommitAction":
        if verb is self.verb:
            return self
        return replace(self, verb=verb, raw=None)


Entry = Union[CommitAction, str]


@dataclass(frozen=True)
class PlanHeader:
    """Identity of a plan: source branch, reference point and range tip."""

    branch: str | None
    onto: str
    tip: str
    count: int

    def render(self) -> list[str]:
        noun = "command" if self.count == 1 else "commands"
        lines = ["", f"# Rebase {self.onto}..{self.tip} onto {self.onto} ({self.count} {noun})"]
        if self.branch:
            lines.append(f"# Branch: {self.branch}")
        lines.append("#")
        lines.extend(FOOTER)
        return lines


def parse_line(line: str) -> Entry:
    """Parse one line into a ``CommitAction`` or return it unchanged."""
    if not line.strip() or line.lstrip().startswith("#"):
        return line
    match = _ACTION_RE.match(line)
    if match is None:
        return line
    verb = Verb(match.group("verb") or "")
    return CommitAction(
        verb=verb,
        commit=match.group("commit").lower(),
        subject=match.group("subject") or "",
        raw=line,
    )


class Plan:
    """In-memory plan file."""

    def __init__(self, entries: list[Entry] | None = None):
        self.entries: list[Entry] = list(entries or [])

    @classmethod
    def parse(cls, text: str) -> "Plan":
        return cls([parse_line(line) for line in text.splitlines()])

    def render(self) -> str:
        if not self.entries:
            return ""
        return "\n".join(e.render() if isinstance(e, CommitAction) else e for e in self.entries) + "\n"

    @property
    def actions(self) -> list[CommitAction]:
        return [e for e in self.entries if isinstance(e, CommitAction)]

    def header(self) -> PlanHeader | None:
        """Re-derive the header from the comment lines, or None if there is none."""
        rebase = None
        branch = None
        for entry in self.entries:
            if isinstance(entry, CommitAction):
                continue
            if m := _REBASE_RE.match(entry):
                rebase = m
            elif m := _BRANCH_RE.match(entry):
                branch = m.group("branch")
        if rebase is None:
            return None
        return PlanHeader(
            branch=branch,
            onto=rebase.group("onto"),
            tip=rebase.group("tip"),
            count=int(rebase.group("count")),
        )

    def truncate_after_last_action(self) -> CommitAction | None:
        """Drop everything after the last commit line and return that line.

        With no commit lines the plan is emptied.
        """
        for index in range(len(self.entries) - 1, -1, -1):
            entry = self.entries[index]
            if isinstance(entry, CommitAction):
                del self.entries[index + 1:]
                return entry
        self.entries.clear()
        return None

    def replace_verbs(self, updates: dict[int, Verb]) -> list[CommitAction]:
        """Set verbs by entry index; return the actions that actually changed."""
        changed: list[CommitAction] = []
        for index, verb in updates.items():
            entry = self.entries[index]
            if not isinstance(entry, CommitAction):
                raise IndexError(f"entry {index} is not a commit line")
            updated = entry.with_verb(verb)
            if updated is not entry:
                self.entries[index] = updated
                changed.append(updated)
        return changed

    def indexed_actions(self) -> list[tuple[int, CommitAction]]:
        return [(i, e) for i, e in enumerate(self.entries) if isinstance(e, CommitAction)]


__all__ = ["Verb", "CommitAction", "Entry", "PlanHeader", "Plan", "parse_line", "FOOTER"]
