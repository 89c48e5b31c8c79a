"""
VCS Protocol
============

The interface the plan store calls into. ``GitVCS`` is the production
implementation; tests provide an in-memory fake with the same surface.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from .types import CommitInfo


@runtime_checkable
class VCSProtocol(Protocol):
    """Operations needed to build, refresh and apply cherry-pick plans."""

    @property
    def repo_root(self) -> Path:
        """Top-level directory of the working tree."""
        ...

    def git_common_dir(self) -> Path:
        """Directory shared by all worktrees (``.git`` for a plain checkout)."""
        ...

    def current_branch(self) -> str:
        """Name of the checked out branch.

        Raises:
            VCSError: If HEAD is detached.
        """
        ...

    def abbrev_width(self) -> int:
        """Fixed width used for abbreviated commit hashes."""
        ...

    def rev_parse(self, ref: str) -> str:
        """Resolve ``ref`` to a full commit hash."""
        ...

    def list_commits(self, include: str, exclude: str | None = None) -> list[CommitInfo]:
        """Commits reachable from ``include`` but not ``exclude``, oldest first."""
        ...

    def resolve_commits(self, abbrevs: Iterable[str]) -> dict[str, str | None]:
        """Map each abbreviation to its full hash, or None if missing/ambiguous."""
        ...

    def cherry_pick(self, commit: str) -> None:
        """Cherry-pick ``commit`` onto HEAD, recording its origin in the message.

        Raises:
            VCSCommandError: If git could not apply the commit.
        """
        ...

    def config_get_all(self, key: str) -> list[str]:
        """All values of a (possibly multi-valued) config key."""
        ...


__all__ = ["VCSProtocol"]
