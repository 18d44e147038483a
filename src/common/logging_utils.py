"""Centralized logging helpers.

All modules log through ``logging.getLogger(__name__)``; this module only
configures the root logger once and offers small helpers for structured
DEBUG traces.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict

from constants import Constants

_CONFIGURED = False


class _ContextFormatter(logging.Formatter):
    """Formatter that appends structured ``extra_context`` fields at DEBUG."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = getattr(record, "context_fields", None)
        if context and record.levelno <= logging.DEBUG:
            rendered = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{base} | {rendered}"
        return base


def configure_logging() -> None:
    """Configure the root logger from RELEASEMERGE_LOG_LEVEL (default INFO).

    Safe to call repeatedly; handlers are only installed once.
    """
    global _CONFIGURED  # pylint: disable=global-statement
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if _CONFIGURED:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
    root.addHandler(handler)
    _CONFIGURED = True


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call.

    None values are dropped so call sites can pass optional fields freely.
    """
    return {"context_fields": {k: v for k, v in fields.items() if v is not None}}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by logger."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, up to now if the block is still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
