"""Shared names and defaults for cherry-plan."""

from __future__ import annotations

CONFIG_SECTION = "cherry-plan"
CONFIG_DIR_KEY = f"{CONFIG_SECTION}.dir"
CONFIG_PATTERN_KEY = f"{CONFIG_SECTION}.pattern"
CONFIG_TRAILER_KEY = f"{CONFIG_SECTION}.trailer"

PROJECT_CONFIG_FILE = ".cherry-plan.yaml"
DEFAULT_PLAN_DIRNAME = "cherry-plan"
PLAN_SUFFIX = ".plan"

# Matches the line `git cherry-pick -x` appends to the new commit's message.
DEFAULT_PROVENANCE_PATTERN = r"\(cherry picked from commit ([0-9a-f]{4,40})\)"

__all__ = [
    "CONFIG_SECTION",
    "CONFIG_DIR_KEY",
    "CONFIG_PATTERN_KEY",
    "CONFIG_TRAILER_KEY",
    "PROJECT_CONFIG_FILE",
    "DEFAULT_PLAN_DIRNAME",
    "PLAN_SUFFIX",
    "DEFAULT_PROVENANCE_PATTERN",
]
