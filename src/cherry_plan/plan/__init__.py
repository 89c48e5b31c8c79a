"""Plan subpackage: the plan file codec, provenance detection and the store.

Modules:
    model: Line-level parsing and rendering of plan files
    detectors: Pluggable detection of already-applied commits
    store: make/pull/mark/apply operations over plan files
    errors: Plan exception hierarchy
"""

from __future__ import annotations

from .errors import (
    ApplyFailure,
    PlanError,
    PlanExistsError,
    PlanNotFoundError,
    PlanReadError,
    PlanResolveError,
)
from .model import CommitAction, Plan, PlanHeader, Verb
from .store import ApplyResult, PlanStore, PlanSummary

__all__ = [
    "ApplyFailure",
    "ApplyResult",
    "CommitAction",
    "Plan",
    "PlanError",
    "PlanExistsError",
    "PlanHeader",
    "PlanNotFoundError",
    "PlanReadError",
    "PlanResolveError",
    "PlanStore",
    "PlanSummary",
    "Verb",
]
