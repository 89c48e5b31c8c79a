"""
VCS Detection Module
====================

Tool detection and the ``get_vcs()`` factory function.
"""

from __future__ import annotations

import shutil
import subprocess
from functools import lru_cache
from pathlib import Path

from .exceptions import VCSNotFoundError
from .git import GitVCS


@lru_cache(maxsize=1)
def is_git_available() -> bool:
    """
    Check if git is installed and working.

    Returns:
        True if git is installed and responds to --version, False otherwise.
    """
    if shutil.which("git") is None:
        return False
    try:
        result = subprocess.run(
            ["git", "--version"],
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, OSError):
        return False


def find_repo_root(path: Path) -> Path:
    """
    Return the top-level directory of the working tree containing ``path``.

    Raises:
        VCSNotFoundError: git is missing or ``path`` is not inside a repository.
    """
    if not is_git_available():
        raise VCSNotFoundError("git is not available. Please install git.")
    result = subprocess.run(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=str(path),
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        detail = result.stderr.strip() or "not a git repository"
        raise VCSNotFoundError(f"{path}: {detail}")
    return Path(result.stdout.strip()).resolve()


def get_vcs(path: Path | None = None) -> GitVCS:
    """
    Factory function returning the VCS backend for the repository at ``path``.

    Args:
        path: Any path inside the repository (default: current directory).

    Raises:
        VCSNotFoundError: git is missing or ``path`` is not inside a repository.
    """
    return GitVCS(find_repo_root(path or Path.cwd()))


__all__ = ["is_git_available", "find_repo_root", "get_vcs"]
