"""Exception hierarchy for plan operations."""

from __future__ import annotations

from pathlib import Path


class PlanError(RuntimeError):
    """Base exception for plan errors."""


class PlanExistsError(PlanError):
    """``make`` was asked to create a plan file that already exists."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Plan file already exists: {path}")


class PlanNotFoundError(PlanError):
    """The referenced plan file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Plan file not found: {path}")


class PlanReadError(PlanError):
    """The plan file exists but cannot be decoded as UTF-8 text."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read plan file {path}: {reason}")


class PlanResolveError(PlanError):
    """One or more plan hashes do not name exactly one commit."""

    def __init__(self, commits: list[str]):
        self.commits = list(commits)
        noun = "commit" if len(self.commits) == 1 else "commits"
        super().__init__(
            f"Cannot resolve plan {noun} {', '.join(self.commits)} to a unique commit"
        )


class ApplyFailure(PlanError):
    """A cherry-pick failed; later picks were not attempted.

    Commits applied before the failure stay in place.
    """

    def __init__(self, commit: str, applied: list[str], detail: str = ""):
        self.commit = commit
        self.applied = list(applied)
        self.detail = detail
        message = f"Cherry-pick of {commit} failed"
        if self.applied:
            message += f" after applying {len(self.applied)} commit(s)"
        super().__init__(message)


__all__ = [
    "PlanError",
    "PlanExistsError",
    "PlanNotFoundError",
    "PlanReadError",
    "PlanResolveError",
    "ApplyFailure",
]
