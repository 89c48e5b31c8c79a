"""Plan directory and provenance settings.

Settings come from git config (``cherry-plan.dir``, ``cherry-plan.pattern``,
``cherry-plan.trailer``), then from ``.cherry-plan.yaml`` at the repository
root, then from built-in defaults. The first source that sets a key wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from ruamel.yaml import YAML

from cherry_plan.core.constants import (
    CONFIG_DIR_KEY,
    CONFIG_PATTERN_KEY,
    CONFIG_TRAILER_KEY,
    DEFAULT_PLAN_DIRNAME,
    DEFAULT_PROVENANCE_PATTERN,
    PROJECT_CONFIG_FILE,
)
from cherry_plan.core.vcs import VCSProtocol


class ConfigError(RuntimeError):
    """Raised when cherry-plan configuration is invalid."""


@dataclass(slots=True)
class ProjectConfigFile:
    """Settings stored in .cherry-plan.yaml."""

    plan_dir: str | None = None
    patterns: list[str] = field(default_factory=list)
    trailers: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: object) -> "ProjectConfigFile":
        if not isinstance(data, dict):
            return cls()

        plan_dir = data.get("dir")
        return cls(
            plan_dir=plan_dir.strip() if isinstance(plan_dir, str) and plan_dir.strip() else None,
            patterns=_string_list(data.get("patterns")),
            trailers=_string_list(data.get("trailers")),
        )


@dataclass(slots=True)
class PlanConfig:
    """Resolved settings used by the plan store."""

    plan_dir: Path
    patterns: list[str] = field(default_factory=lambda: [DEFAULT_PROVENANCE_PATTERN])
    trailers: list[str] = field(default_factory=list)

    def compiled_patterns(self) -> list[re.Pattern[str]]:
        """Compile provenance patterns; each must capture the commit id in group 1."""
        compiled: list[re.Pattern[str]] = []
        for pattern in self.patterns:
            try:
                regex = re.compile(pattern)
            except re.error as exc:
                raise ConfigError(f"Invalid provenance pattern {pattern!r}: {exc}") from exc
            if regex.groups < 1:
                raise ConfigError(
                    f"Provenance pattern {pattern!r} must contain a capture group for the commit id"
                )
            compiled.append(regex)
        return compiled


def _string_list(value: object) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if str(item).strip()]


def _config_path(repo_root: Path) -> Path:
    return repo_root / PROJECT_CONFIG_FILE


def load_project_config(repo_root: Path) -> ProjectConfigFile:
    """Load settings from .cherry-plan.yaml, or empty settings if absent."""
    config_path = _config_path(repo_root)
    if not config_path.exists():
        return ProjectConfigFile()

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except Exception as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc

    return ProjectConfigFile.from_dict(payload)


def load_plan_config(vcs: VCSProtocol) -> PlanConfig:
    """Resolve plan settings for the repository ``vcs`` operates on."""
    project = load_project_config(vcs.repo_root)

    dir_values = vcs.config_get_all(CONFIG_DIR_KEY)
    raw_dir = dir_values[-1] if dir_values else project.plan_dir
    if raw_dir:
        plan_dir = Path(raw_dir).expanduser()
        if not plan_dir.is_absolute():
            plan_dir = vcs.repo_root / plan_dir
    else:
        plan_dir = vcs.git_common_dir() / DEFAULT_PLAN_DIRNAME

    patterns = vcs.config_get_all(CONFIG_PATTERN_KEY) or project.patterns or [DEFAULT_PROVENANCE_PATTERN]
    trailers = vcs.config_get_all(CONFIG_TRAILER_KEY) or project.trailers

    return PlanConfig(plan_dir=plan_dir, patterns=list(patterns), trailers=list(trailers))


__all__ = [
    "ConfigError",
    "PlanConfig",
    "ProjectConfigFile",
    "load_plan_config",
    "load_project_config",
]
