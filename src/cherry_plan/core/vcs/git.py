"""
Git VCS Implementation
======================

Thin wrapper over the ``git`` executable. Each method maps to one git
command so side effects stay easy to reason about.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable

from .exceptions import VCSCommandError, VCSError, VCSNotFoundError
from .types import CommitInfo

logger = logging.getLogger(__name__)

DEFAULT_ABBREV = 7

# Separators for git log --format; neither can appear in a commit message.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


class GitVCS:
    """Git implementation of ``VCSProtocol``."""

    def __init__(self, repo_root: Path, timeout: int = 120):
        self._repo_root = repo_root
        self.timeout = timeout

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    def git_common_dir(self) -> Path:
        out = self._git(["rev-parse", "--git-common-dir"]).strip()
        path = Path(out)
        if not path.is_absolute():
            path = self._repo_root / path
        return path.resolve()

    def current_branch(self) -> str:
        completed = self._run(["symbolic-ref", "--quiet", "--short", "HEAD"])
        if completed.returncode != 0:
            raise VCSError("Detached HEAD; check out a named branch or pass a plan file explicitly.")
        return completed.stdout.strip()

    def abbrev_width(self) -> int:
        values = self.config_get_all("core.abbrev")
        if not values:
            return DEFAULT_ABBREV
        try:
            width = int(values[-1])
        except ValueError:
            # "auto" or "no"
            return DEFAULT_ABBREV
        return min(max(width, 4), 40)

    def rev_parse(self, ref: str) -> str:
        return self._git(["rev-parse", "--verify", f"{ref}^{{commit}}"]).strip()

    def list_commits(self, include: str, exclude: str | None = None) -> list[CommitInfo]:
        args = [
            "log",
            "--reverse",
            "--no-merges",
            f"--format=%H{_FIELD_SEP}%s{_FIELD_SEP}%B{_RECORD_SEP}",
            include,
        ]
        if exclude:
            args.append(f"^{exclude}")
        args.append("--")
        out = self._git(args)

        commits: list[CommitInfo] = []
        for record in out.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record.strip():
                continue
            commit_id, subject, body = record.split(_FIELD_SEP, 2)
            commits.append(CommitInfo(commit_id=commit_id, subject=subject, message_full=body.rstrip("\n")))
        return commits

    def resolve_commits(self, abbrevs: Iterable[str]) -> dict[str, str | None]:
        wanted = list(dict.fromkeys(abbrevs))
        if not wanted:
            return {}
        payload = "".join(f"{abbrev}^{{commit}}\n" for abbrev in wanted)
        out = self._git(["cat-file", "--batch-check"], input=payload)

        result: dict[str, str | None] = {}
        for abbrev, line in zip(wanted, out.splitlines()):
            parts = line.split()
            if len(parts) >= 2 and parts[1] == "commit":
                result[abbrev] = parts[0]
            else:
                # "<name> missing" or "<name> ambiguous"
                logger.debug("Could not resolve %s: %s", abbrev, line)
                result[abbrev] = None
        return result

    def cherry_pick(self, commit: str) -> None:
        self._git(["cherry-pick", "-x", commit])

    def config_get_all(self, key: str) -> list[str]:
        completed = self._run(["config", "--get-all", key])
        if completed.returncode == 1:
            # key not set
            return []
        if completed.returncode != 0:
            raise VCSCommandError(["config", "--get-all", key], completed.returncode, completed.stderr)
        return [line for line in completed.stdout.splitlines() if line.strip()]

    def _git(self, args: list[str], *, input: str | None = None) -> str:
        completed = self._run(args, input=input)
        if completed.returncode != 0:
            raise VCSCommandError(args, completed.returncode, completed.stderr)
        return completed.stdout

    def _run(self, args: list[str], *, input: str | None = None) -> subprocess.CompletedProcess[str]:
        logger.debug("git %s", " ".join(args))
        try:
            return subprocess.run(
                ["git", *args],
                cwd=str(self._repo_root),
                input=input,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise VCSNotFoundError("git executable not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise VCSError(f"git command timed out: git {' '.join(args)}") from exc


__all__ = ["GitVCS", "DEFAULT_ABBREV"]
