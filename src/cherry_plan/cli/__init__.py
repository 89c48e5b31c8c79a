"""CLI helpers exposed for other modules."""

from .ui import StepTracker, summary_table

__all__ = ["StepTracker", "summary_table"]
