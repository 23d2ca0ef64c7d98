"""Configuration schema models for mystbin-client.

These models describe the sections of the settings file and are validated
by the Settings class when configuration is loaded from YAML files and
environment variables.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path  # noqa: TC003 - needed at runtime for Pydantic
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mystbin_client.observability.logging import LogLevel  # noqa: TC001


__all__ = [
    "ApiConfig",
    "ConfigBaseModel",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class LogFormat(StrEnum):
    """Log output format.

    Attributes:
        LOGFMT: Machine-parseable key=value lines.
        CONSOLE: Human-readable console output with colors.
    """

    LOGFMT = "logfmt"
    CONSOLE = "console"


# ---------------------------------------------------------------------------
# Base Configuration Model
# ---------------------------------------------------------------------------


class ConfigBaseModel(BaseModel):
    """Base model for all configuration sections.

    Unknown keys are rejected so that typos in the settings file surface
    as validation errors instead of being silently ignored.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_default=True,
    )


# ---------------------------------------------------------------------------
# API Connection
# ---------------------------------------------------------------------------


class ApiConfig(ConfigBaseModel):
    """mystb.in API connection configuration.

    The token is optional; without one only the anonymous endpoints can be
    used. If both `token` and `token_file` are set, `token` wins.

    Attributes:
        base_url: Base URL of the API.
        token: API token (supports ${VAR} interpolation).
        token_file: Path to a file containing the API token.
        timeout: Read/write/pool timeout in seconds.
        connect_timeout: Connection timeout in seconds.
    """

    base_url: str = Field(
        default="https://api.mystb.in",
        description="Base URL of the mystb.in API",
    )
    token: str | None = Field(
        default=None,
        description="API token (supports ${VAR} interpolation)",
    )
    token_file: Path | None = Field(
        default=None,
        description="Path to file containing the API token",
    )
    timeout: Annotated[float, Field(gt=0, description="Request timeout")] = 30.0
    connect_timeout: Annotated[
        float,
        Field(gt=0, description="Connection timeout"),
    ] = 10.0

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Remove trailing slash from URL to avoid double slashes."""
        return v.rstrip("/")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class LoggingConfig(ConfigBaseModel):
    """Logging configuration.

    Attributes:
        level: Log verbosity level.
        format: Log output format. When unset, console output is used on a
            TTY and logfmt otherwise.
    """

    level: LogLevel = Field(default=LogLevel.WARNING)
    format: LogFormat | None = Field(default=None)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept level names in any case, e.g. ``DEBUG`` or ``debug``."""
        return v.lower() if isinstance(v, str) else v
