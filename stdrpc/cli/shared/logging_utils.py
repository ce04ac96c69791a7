"""Loguru helpers for consistent logging in CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

_SINK_IDS: dict[str, int] = {}


def get_log_dir() -> Path:
    return Path.home() / ".stdrpc" / "logs"


def configure_stderr_logging(level: str = "INFO") -> None:
    """
    Reset loguru to a single stderr sink at the given level.

    File sinks are dropped too; ``ensure_rotating_log_file`` re-adds them.
    """
    logger.remove()
    _SINK_IDS.clear()
    logger.add(sys.stderr, level=level.upper(), format="<level>{level: <8}</level> {message}")


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_dir = get_log_dir()
    log_path = log_dir / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_dir.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level.upper(),
        rotation="10 MB",
        retention="14 days",
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path
