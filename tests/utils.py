"""Shared test helpers: an in-memory VCS and real-git repository builders."""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path
from typing import Iterable

from cherry_plan.core.vcs import CommitInfo, VCSCommandError


def sha(label: str) -> str:
    """Deterministic 40-character hex id for a label."""
    return hashlib.sha1(label.encode("utf-8")).hexdigest()


class FakeVCS:
    """In-memory VCSProtocol with linear branch histories.

    ``refs`` maps a branch name to its full history, oldest first.
    """

    def __init__(self, repo_root: Path, width: int = 7):
        self._repo_root = repo_root
        self.width = width
        self.branch = "main"
        self.commits: dict[str, CommitInfo] = {}
        self.refs: dict[str, list[str]] = {}
        self.config: dict[str, list[str]] = {}
        self.picked: list[str] = []
        self.fail_on: set[str] = set()

    # helpers for tests -------------------------------------------------

    def commit(self, branch: str, subject: str, body: str = "", commit_id: str | None = None) -> str:
        commit_id = commit_id or sha(f"{branch}:{subject}:{len(self.commits)}")
        message = subject + (f"\n\n{body}" if body else "")
        self.commits[commit_id] = CommitInfo(commit_id=commit_id, subject=subject, message_full=message)
        self.refs.setdefault(branch, []).append(commit_id)
        return commit_id

    def fork(self, new_branch: str, from_branch: str) -> None:
        self.refs[new_branch] = list(self.refs[from_branch])

    def _history(self, ref: str) -> list[str]:
        if ref == "HEAD":
            ref = self.branch
        if ref in self.refs:
            return list(self.refs[ref])
        for history in self.refs.values():
            if ref in history:
                return history[: history.index(ref) + 1]
        raise VCSCommandError(["rev-parse", ref], 128, f"unknown revision {ref}")

    # VCSProtocol -------------------------------------------------------

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    def git_common_dir(self) -> Path:
        return self._repo_root / ".git"

    def current_branch(self) -> str:
        return self.branch

    def abbrev_width(self) -> int:
        return self.width

    def rev_parse(self, ref: str) -> str:
        return self._history(ref)[-1]

    def list_commits(self, include: str, exclude: str | None = None) -> list[CommitInfo]:
        excluded = set(self._history(exclude)) if exclude else set()
        return [self.commits[c] for c in self._history(include) if c not in excluded]

    def resolve_commits(self, abbrevs: Iterable[str]) -> dict[str, str | None]:
        result: dict[str, str | None] = {}
        for abbrev in abbrevs:
            matches = [c for c in self.commits if c.startswith(abbrev.lower())]
            result[abbrev] = matches[0] if len(matches) == 1 else None
        return result

    def cherry_pick(self, commit: str) -> None:
        if commit in self.fail_on:
            raise VCSCommandError(["cherry-pick", "-x", commit], 1, "error: could not apply")
        self.picked.append(commit)
        original = self.commits[commit]
        self.commit(
            self.branch,
            original.subject,
            body=f"(cherry picked from commit {commit})",
        )

    def config_get_all(self, key: str) -> list[str]:
        return list(self.config.get(key, []))


def run(cmd: list[str], cwd: Path) -> str:
    completed = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True)
    return completed.stdout


def git_commit(repo: Path, filename: str, content: str, message: str) -> str:
    (repo / filename).write_text(content, encoding="utf-8")
    run(["git", "add", filename], cwd=repo)
    run(["git", "commit", "-q", "-m", message], cwd=repo)
    return run(["git", "rev-parse", "HEAD"], cwd=repo).strip()


