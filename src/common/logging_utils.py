"""Centralized logging helpers shared by the CLI and the install engine.

Structured DEBUG traces pass their fields through ``extra=extra_context(...)``
so that handlers and tests can inspect them without parsing messages.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_REDACTED = "***"


class ProgressAwareFormatter(logging.Formatter):
    """Timestamped plain lines for progress notes, LOG_FORMAT for the rest."""

    def __init__(self) -> None:
        super().__init__(Constants.LOG_FORMAT)
        self._progress = logging.Formatter(Constants.PROGRESS_FORMAT, datefmt=Constants.PROGRESS_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        if record.name == Constants.PROGRESS_LOGGER:
            return self._progress.format(record)
        return super().format(record)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once, honouring CPANFAST_LOG_LEVEL.

    Args:
        level: Explicit level name; falls back to the environment, then INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ProgressAwareFormatter())
        root.addHandler(handler)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    ``None`` values are dropped so records only carry what is known.
    """
    return {k: v for k, v in fields.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip credentials and query strings from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{_REDACTED}@{netloc.rsplit('@', 1)[1]}"
    query = _REDACTED if parts.query else ""
    return urlunsplit((parts.scheme, netloc, parts.path, query, ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        self._end = None
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.monotonic()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)
