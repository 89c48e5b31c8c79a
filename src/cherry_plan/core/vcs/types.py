"""Value types returned by VCS backends."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommitInfo:
    """A single commit as listed by the backend.

    ``commit_id`` is always the full hash; abbreviations are a rendering
    concern of the plan file.
    """

    commit_id: str
    subject: str
    message_full: str = ""

    def short(self, width: int) -> str:
        return self.commit_id[:width]


__all__ = ["CommitInfo"]
