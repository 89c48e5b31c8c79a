"""Plan file state machine: make, pull, mark and apply.

Policy for ``apply``: picks run in file order, the first failure stops the
run, and nothing already applied is rolled back. The operator resolves the
repository state by hand, runs ``mark`` so applied commits become ``noop``,
and applies again.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from cherry_plan.core.config import PlanConfig, load_plan_config
from cherry_plan.core.constants import DEFAULT_PROVENANCE_PATTERN, PLAN_SUFFIX
from cherry_plan.core.utils import atomic_write_text
from cherry_plan.core.vcs import CommitInfo, VCSCommandError, VCSProtocol
from cherry_plan.plan.detectors import (
    PatternDetector,
    ProvenanceDetector,
    build_detectors,
    detect_applied,
)
from cherry_plan.plan.errors import (
    ApplyFailure,
    PlanExistsError,
    PlanNotFoundError,
    PlanReadError,
    PlanResolveError,
)
from cherry_plan.plan.model import CommitAction, Plan, PlanHeader, Verb

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Outcome of a successful (or dry-run) apply."""

    path: Path
    picks: list[CommitAction] = field(default_factory=list)
    applied: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass
class PlanSummary:
    """Counts per verb plus the plan's header identity."""

    path: Path
    header: PlanHeader | None
    counts: dict[Verb, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class PlanStore:
    """Reads, writes and executes plan files for one repository."""

    def __init__(
        self,
        vcs: VCSProtocol,
        *,
        plan_dir: Path,
        detectors: Sequence[ProvenanceDetector] | None = None,
    ):
        self.vcs = vcs
        self.plan_dir = plan_dir
        if detectors is None:
            detectors = [PatternDetector([DEFAULT_PROVENANCE_PATTERN])]
        self.detectors = list(detectors)

    @classmethod
    def from_config(cls, vcs: VCSProtocol, config: PlanConfig | None = None) -> "PlanStore":
        config = config or load_plan_config(vcs)
        return cls(vcs, plan_dir=config.plan_dir, detectors=build_detectors(config))

    # ------------------------------------------------------------------
    # Paths and I/O
    # ------------------------------------------------------------------

    def default_path(self) -> Path:
        """``<plan dir>/<current branch>.plan``."""
        return self.plan_dir / f"{self.vcs.current_branch()}{PLAN_SUFFIX}"

    def resolve_path(self, path: Path | None) -> Path:
        return path if path is not None else self.default_path()

    def load(self, path: Path | None = None) -> Plan:
        return Plan.parse(self._read(self.resolve_path(path)))

    def _read(self, path: Path) -> str:
        if not path.is_file():
            raise PlanNotFoundError(path)
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PlanReadError(path, str(exc)) from exc

    def _new_action(self, commit: CommitInfo, width: int) -> CommitAction:
        return CommitAction(verb=Verb.UNDECIDED, commit=commit.short(width), subject=commit.subject)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def make(self, branch: str, limit: str = "HEAD", path: Path | None = None) -> Path:
        """Create a plan of the commits in ``limit..branch``, oldest first.

        Raises:
            PlanExistsError: If the plan file already exists.
        """
        path = self.resolve_path(path)
        if path.exists():
            raise PlanExistsError(path)

        width = self.vcs.abbrev_width()
        onto = self.vcs.rev_parse(limit)
        tip = self.vcs.rev_parse(branch)
        commits = self.vcs.list_commits(branch, exclude=onto)

        plan = Plan([self._new_action(commit, width) for commit in commits])
        plan.replace_verbs(self._applied_updates(plan, branch))
        header = PlanHeader(branch=branch, onto=onto[:width], tip=tip[:width], count=len(plan.actions))
        plan.entries.extend(header.render())

        atomic_write_text(path, plan.render())
        logger.info("Created plan %s with %d commit(s) from %s", path, len(commits), branch)
        return path

    def pull(self, branch: str, path: Path | None = None) -> list[CommitAction]:
        """Append commits added to ``branch`` since the last planned commit.

        Returns the newly appended actions (empty when nothing is new).

        Raises:
            PlanNotFoundError: If the plan file does not exist.
            PlanResolveError: If the last planned commit no longer resolves.
        """
        path = self.resolve_path(path)
        plan = self.load(path)
        width = self.vcs.abbrev_width()

        previous = plan.header()
        onto = previous.onto if previous is not None else self.vcs.rev_parse("HEAD")[:width]

        last = plan.truncate_after_last_action()
        if last is None:
            commits = self.vcs.list_commits(branch)
        else:
            resolved = self.vcs.resolve_commits([last.commit]).get(last.commit)
            if resolved is None:
                raise PlanResolveError([last.commit])
            commits = self.vcs.list_commits(branch, exclude=resolved)

        added = [self._new_action(commit, width) for commit in commits]
        plan.entries.extend(added)
        tip = self.vcs.rev_parse(branch)
        header = PlanHeader(branch=branch, onto=onto, tip=tip[:width], count=len(plan.actions))
        plan.entries.extend(header.render())

        atomic_write_text(path, plan.render())
        logger.info("Pulled %d new commit(s) from %s into %s", len(added), branch, path)
        return added

    def mark(self, path: Path | None = None, branch: str | None = None) -> list[CommitAction]:
        """Recompute ``noop`` verbs from provenance found in ``branch..HEAD``.

        Every existing ``noop`` is reset to undecided first. The branch comes
        from the plan header when not given. Returns the actions now ``noop``.

        Raises:
            PlanNotFoundError: If the plan file does not exist.
        """
        path = self.resolve_path(path)
        original = self._read(path)
        plan = Plan.parse(original)

        updates = {i: Verb.UNDECIDED for i, action in plan.indexed_actions() if action.verb is Verb.NOOP}

        if branch is None:
            header = plan.header()
            branch = header.branch if header is not None else None
        if branch:
            updates.update(self._applied_updates(plan, branch))
        else:
            logger.warning("No source branch recorded in %s; only resetting noop entries", path)

        plan.replace_verbs(updates)
        rendered = plan.render()
        if rendered != original:
            atomic_write_text(path, rendered)
        return [a for a in plan.actions if a.verb is Verb.NOOP]

    def apply(
        self,
        path: Path | None = None,
        *,
        dry_run: bool = False,
        on_start: Callable[[CommitAction], None] | None = None,
        on_applied: Callable[[CommitAction], None] | None = None,
    ) -> ApplyResult:
        """Cherry-pick every ``pick`` entry in file order.

        All picks are resolved before the first cherry-pick runs. ``on_start``
        and ``on_applied`` are called around each cherry-pick.

        Raises:
            PlanNotFoundError: If the plan file does not exist.
            PlanResolveError: If any pick does not resolve to a unique commit.
            ApplyFailure: On the first cherry-pick that fails.
        """
        path = self.resolve_path(path)
        plan = self.load(path)

        picks = [action for action in plan.actions if action.verb is Verb.PICK]
        resolved = self.vcs.resolve_commits(action.commit for action in picks)
        unresolved = [action.commit for action in picks if resolved.get(action.commit) is None]
        if unresolved:
            raise PlanResolveError(unresolved)

        result = ApplyResult(path=path, picks=picks, dry_run=dry_run)
        if dry_run:
            return result

        for action in picks:
            logger.info("Cherry-picking %s %s", action.commit, action.subject)
            if on_start is not None:
                on_start(action)
            try:
                self.vcs.cherry_pick(resolved[action.commit])
            except VCSCommandError as exc:
                raise ApplyFailure(action.commit, result.applied, exc.stderr) from exc
            result.applied.append(action.commit)
            if on_applied is not None:
                on_applied(action)
        return result

    def status(self, path: Path | None = None) -> PlanSummary:
        path = self.resolve_path(path)
        plan = self.load(path)
        counts = Counter(action.verb for action in plan.actions)
        return PlanSummary(
            path=path,
            header=plan.header(),
            counts={verb: counts.get(verb, 0) for verb in Verb},
        )

    # ------------------------------------------------------------------
    # Provenance
    # ------------------------------------------------------------------

    def _applied_updates(self, plan: Plan, branch: str) -> dict[int, Verb]:
        """Map entry index -> NOOP for actions already applied to HEAD."""
        indexed = plan.indexed_actions()
        if not indexed:
            return {}

        history = self.vcs.list_commits("HEAD", exclude=branch)
        applied = detect_applied(self.detectors, history, self.vcs)
        if not applied:
            return {}

        resolved = self.vcs.resolve_commits(action.commit for _, action in indexed)
        updates: dict[int, Verb] = {}
        for index, action in indexed:
            full = resolved.get(action.commit)
            if full is None:
                logger.warning("Skipping %s: does not resolve to a unique commit", action.commit)
                continue
            if full in applied:
                logger.debug("%s already applied; marking noop", action.commit)
                updates[index] = Verb.NOOP
        return updates


__all__ = ["PlanStore", "ApplyResult", "PlanSummary"]
