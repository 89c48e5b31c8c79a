"""Exception hierarchy for version-control operations."""

from __future__ import annotations


class VCSError(RuntimeError):
    """Base exception for VCS errors."""


class VCSNotFoundError(VCSError):
    """git is not installed, or the path is not inside a repository."""


class VCSCommandError(VCSError):
    """A git command exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"git {' '.join(args)} failed with exit code {returncode}{detail}")


__all__ = ["VCSError", "VCSNotFoundError", "VCSCommandError"]
