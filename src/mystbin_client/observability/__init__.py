"""Observability module (structured logging)."""

from __future__ import annotations

from mystbin_client.observability.logging import (
    LogLevel,
    configure_logging,
    get_logger,
)


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
]
