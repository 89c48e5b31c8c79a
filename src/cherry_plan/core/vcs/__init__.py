"""
VCS Abstraction Package
=======================

Usage:
    from cherry_plan.core.vcs import get_vcs, VCSProtocol

    vcs = get_vcs(Path.cwd())  # GitVCS rooted at the enclosing repository
    commits = vcs.list_commits("feature", exclude="HEAD")
"""

from __future__ import annotations

from .types import CommitInfo

from .protocol import VCSProtocol

from .exceptions import (
    VCSCommandError,
    VCSError,
    VCSNotFoundError,
)

from .git import DEFAULT_ABBREV, GitVCS

from .detection import (
    find_repo_root,
    get_vcs,
    is_git_available,
)

__all__ = [
    # Dataclasses
    "CommitInfo",
    # Protocol
    "VCSProtocol",
    # Implementation
    "GitVCS",
    "DEFAULT_ABBREV",
    # Factory and detection
    "get_vcs",
    "find_repo_root",
    "is_git_available",
    # Exceptions
    "VCSError",
    "VCSNotFoundError",
    "VCSCommandError",
]
