"""Core utilities and configuration exports."""

from .config import ConfigError, PlanConfig, load_plan_config
from .utils import atomic_write_text, format_path, setup_logging

__all__ = [
    "ConfigError",
    "PlanConfig",
    "load_plan_config",
    "atomic_write_text",
    "format_path",
    "setup_logging",
]
