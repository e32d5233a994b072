"""Structured logging setup with structlog.

Console output for interactive use, JSON lines for cron jobs and log
shippers.  Everything goes to stderr so stdout stays free for reports.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal, TextIO

import structlog

LogFormat = Literal["console", "json"]


def configure_logging(
    level: str = "INFO",
    fmt: LogFormat = "console",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the process. Safe to call more than once."""
    level_no = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=(stream or sys.stderr).isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial: Any) -> Any:
    """Return a bound logger, optionally pre-bound with *initial* values."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial) if initial else logger
