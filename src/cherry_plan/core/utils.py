"""Small helpers shared by the CLI and the plan store."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path

_HANDLER_NAME = "cherry_plan.stderr"


def setup_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Setup logging configuration for cherry-plan.

    Args:
        level: Logging level
        format_string: Custom format string

    Returns:
        Logger for the cherry_plan package

    Only the ``cherry_plan`` logger is configured; the root logger is left
    alone. Calling this again replaces the handler instead of adding one.
    """
    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logger = logging.getLogger("cherry_plan")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    # stdout carries plan output, so logs go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string))
    handler.set_name(_HANDLER_NAME)
    logger.addHandler(handler)

    return logger


def atomic_write_text(path: Path, text: str) -> None:
    """Atomically replace ``path`` with ``text`` (temp file + rename).

    The temp file is created in the same directory so the rename stays on
    one filesystem.

    Raises:
        OSError: If the write fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def format_path(path: Path, base: Path | None = None) -> str:
    """Render ``path`` relative to ``base`` when it lies underneath it."""
    if base is not None:
        try:
            return str(path.relative_to(base))
        except ValueError:
            pass
    return str(path)


__all__ = ["setup_logging", "atomic_write_text", "format_path"]
