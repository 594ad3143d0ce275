"""Centralized logging helpers.

All modules log through ``logging.getLogger(__name__)``; this module owns the
root handler setup and the structured ``extra`` payload used for DEBUG traces.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_NAME = "packlink-console"


def _resolve_level(level_name: Optional[str]) -> int:
    if not level_name:
        return logging.INFO
    value = getattr(logging, str(level_name).upper(), None)
    if isinstance(value, int):
        return value
    return logging.INFO


def configure_logging(level_name: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Install the console handler on the root logger.

    The level is taken from ``level_name`` when given, else from the
    ``PACKLINK_LOG_LEVEL`` environment variable, else INFO. Calling this more
    than once replaces the previous console handler instead of stacking them.

    Args:
        level_name: Optional level name such as "DEBUG".
        log_file: Optional path; adds a timestamped file handler.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.set_name(_HANDLER_NAME)
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(console)

    root.setLevel(_resolve_level(level_name or os.environ.get(Constants.ENV_LOG_LEVEL)))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def log_failure(logger: logging.Logger, error: Exception) -> None:
    """Log ``error`` as a single ERROR line.

    Collaborator output, when the error carries any, follows as its own
    INFO record so the diagnostic line stays one line.
    """
    logger.error("%s", error)
    detail = getattr(error, "detail", "")
    if detail:
        logger.info("Output:\n%s", detail)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    None values are dropped so records only carry the fields that apply.
    """
    return {key: value for key, value in fields.items() if value is not None}


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
