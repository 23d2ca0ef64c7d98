"""Configuration module for mystbin-client.

Settings are Pydantic models loaded from a YAML file and ``MYSTBIN_*``
environment variables, with ${VAR} and ${VAR:-default} interpolation in
YAML values.

Example:
    >>> from mystbin_client.config import load_settings
    >>> settings = load_settings("mystbin.yaml")
    >>> settings.api.timeout
    30.0
"""

from __future__ import annotations

from mystbin_client.config.exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
)
from mystbin_client.config.schema import (
    ApiConfig,
    ConfigBaseModel,
    LogFormat,
    LoggingConfig,
    LogLevel,
)
from mystbin_client.config.settings import (
    Settings,
    find_config_file,
    load_settings,
)


__all__ = [
    "ApiConfig",
    "ConfigBaseModel",
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "Settings",
    "find_config_file",
    "load_settings",
]
