"""Provenance detection: which planned commits were already applied.

A detector looks at commit messages on the current line of history and
reports the upstream commits they were copied from, as a mapping from full
hash to an applied flag. The plan store only consumes that mapping, so new
strategies can be added without touching the plan state machine.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Protocol, Sequence

from cherry_plan.core.config import PlanConfig
from cherry_plan.core.vcs import CommitInfo, VCSProtocol

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9a-fA-F]{4,64}$")
_TRAILER_RE = re.compile(r"^(?P<key>[A-Za-z0-9][A-Za-z0-9-]*)\s*:\s*(?P<value>.+)$")


class ProvenanceDetector(Protocol):
    """Strategy returning ``{full_hash: applied}`` for upstream commits."""

    def detect(self, commits: Sequence[CommitInfo], vcs: VCSProtocol) -> dict[str, bool]:
        ...


def _resolve_applied(candidates: Iterable[str], vcs: VCSProtocol) -> dict[str, bool]:
    """Resolve candidate ids to full hashes; unknown ids are dropped."""
    wanted = [c.lower() for c in candidates if _HEX_RE.match(c)]
    applied: dict[str, bool] = {}
    for candidate, full in vcs.resolve_commits(wanted).items():
        if full is None:
            logger.debug("Ignoring provenance reference %s: no unique commit", candidate)
            continue
        applied[full] = True
    return applied


class PatternDetector:
    """Scan full commit messages with regular expressions.

    Group 1 of each pattern captures the referenced commit id.
    """

    def __init__(self, patterns: Iterable[re.Pattern[str] | str]):
        self.patterns = [re.compile(p) if isinstance(p, str) else p for p in patterns]

    def candidates(self, message: str) -> list[str]:
        found: list[str] = []
        for pattern in self.patterns:
            for match in pattern.finditer(message):
                if match.group(1):
                    found.append(match.group(1))
        return found

    def detect(self, commits: Sequence[CommitInfo], vcs: VCSProtocol) -> dict[str, bool]:
        candidates: list[str] = []
        for commit in commits:
            candidates.extend(self.candidates(commit.message_full))
        return _resolve_applied(candidates, vcs)


class TrailerDetector:
    """Read commit ids from git trailers such as ``Cherry-picked-from: <hash>``.

    Only the final paragraph of a message is treated as the trailer block.
    """

    def __init__(self, keys: Iterable[str]):
        self.keys = {key.strip().lower() for key in keys if key.strip()}

    def candidates(self, message: str) -> list[str]:
        paragraphs = [p for p in message.strip().split("\n\n") if p.strip()]
        if len(paragraphs) < 2:
            # a subject line alone has no trailer block
            return []
        found: list[str] = []
        for line in paragraphs[-1].splitlines():
            match = _TRAILER_RE.match(line.strip())
            if match and match.group("key").lower() in self.keys:
                value = match.group("value").split()[0]
                found.append(value)
        return found

    def detect(self, commits: Sequence[CommitInfo], vcs: VCSProtocol) -> dict[str, bool]:
        candidates: list[str] = []
        for commit in commits:
            candidates.extend(self.candidates(commit.message_full))
        return _resolve_applied(candidates, vcs)


def build_detectors(config: PlanConfig) -> list[ProvenanceDetector]:
    """Detectors enabled by ``config``: patterns always, trailers when configured."""
    detectors: list[ProvenanceDetector] = [PatternDetector(config.compiled_patterns())]
    if config.trailers:
        detectors.append(TrailerDetector(config.trailers))
    return detectors


def detect_applied(
    detectors: Sequence[ProvenanceDetector],
    commits: Sequence[CommitInfo],
    vcs: VCSProtocol,
) -> set[str]:
    """Union of full hashes any detector reports as applied."""
    applied: set[str] = set()
    for detector in detectors:
        applied.update(h for h, flag in detector.detect(commits, vcs).items() if flag)
    return applied


__all__ = [
    "ProvenanceDetector",
    "PatternDetector",
    "TrailerDetector",
    "build_detectors",
    "detect_applied",
]
