"""Structured logging configuration for mystbin-client.

The library itself only emits structlog events (``api_request``,
``api_response``, ``connection_error`` and so on) and never configures
logging on import. Applications, and the ``mystbin`` command line, call
:func:`configure_logging` once at startup to choose level and output:

- colorized console output when stderr is a TTY
- logfmt lines otherwise, for log collectors
- ISO 8601 timestamps in UTC
"""

from __future__ import annotations

import logging
import sys
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import TimeStamper, add_log_level


if TYPE_CHECKING:
    from structlog.typing import Processor


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
]


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_stdlib_level(self) -> int:
        """Return the matching :mod:`logging` level constant."""
        level: int = getattr(logging, self.name)
        return level


def _create_renderer(*, colors: bool) -> Processor:
    """Pick the console renderer for terminals and logfmt for everything else."""
    if colors:
        return structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    return structlog.processors.LogfmtRenderer(
        key_order=["timestamp", "level", "event", "method", "path"],
        drop_missing=True,
        bool_as_flag=False,
    )


def _stderr_is_tty() -> bool:
    return (
        sys.stderr is not None
        and hasattr(sys.stderr, "isatty")
        and sys.stderr.isatty()
    )


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    *,
    log_format: str | None = None,
    force_colors: bool | None = None,
) -> None:
    """Configure structlog (and stdlib logging) for the process.

    Args:
        level: Minimum level, as a LogLevel or a case-insensitive name.
        log_format: ``"console"`` or ``"logfmt"``; None picks by TTY.
        force_colors: Force colors on or off for console output.

    Example:
        >>> configure_logging("debug", log_format="logfmt")
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    if log_format is None:
        use_colors = force_colors if force_colors is not None else _stderr_is_tty()
    else:
        use_colors = log_format == "console" and force_colors is not False

    processors: list[Processor] = [
        merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _create_renderer(colors=use_colors),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level.to_stdlib_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # httpx logs through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level.to_stdlib_level(),
        force=True,
    )


def get_logger(
    name: str | None = None,
    **initial_context: object,
) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger, optionally with bound context.

    Example:
        >>> log = get_logger(__name__, command="create")
        >>> log.info("paste_created", paste_id="EquipmentMovingExpensive")
    """
    log: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    if initial_context:
        log = log.bind(**initial_context)
    return log
