"""Settings management for mystbin-client.

Settings come from (highest priority first) constructor arguments,
``MYSTBIN_*`` environment variables, and a YAML file. YAML values may
reference the environment with ``${VAR}`` or ``${VAR:-default}``.

Example:
    >>> from mystbin_client.config import load_settings
    >>> settings = load_settings()
    >>> print(settings.api.base_url)
    https://api.mystb.in
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from mystbin_client.config.exceptions import (
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
)
from mystbin_client.config.schema import ApiConfig, LoggingConfig


if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = [
    "Settings",
    "find_config_file",
    "load_settings",
]


# ---------------------------------------------------------------------------
# Environment Variable Interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _interpolate_env_vars(value: object) -> object:
    """Recursively replace ${VAR} and ${VAR:-default} in strings.

    Unset variables without a default become empty strings. Dicts and
    lists are walked; other values are returned unchanged.

    Example:
        >>> os.environ["MYSTBIN_TEST"] = "abc"
        >>> _interpolate_env_vars({"token": "${MYSTBIN_TEST}"})
        {'token': 'abc'}
        >>> _interpolate_env_vars("${UNSET_VAR:-fallback}")
        'fallback'
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            return match.group(2) or ""

        return _ENV_VAR_PATTERN.sub(replace, value)

    if isinstance(value, dict):
        return {k: _interpolate_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_interpolate_env_vars(item) for item in value]

    return value


class _InterpolatingYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML settings source that interpolates environment variables."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | str | None = None,
    ) -> None:
        if yaml_file is not None:
            super().__init__(settings_cls, yaml_file=yaml_file)
        else:
            super().__init__(settings_cls)

    def _read_files(
        self,
        files: Path | str | Sequence[Path | str] | None,
    ) -> dict[str, Any]:
        interpolated = _interpolate_env_vars(super()._read_files(files))
        if not isinstance(interpolated, dict):  # pragma: no cover
            return {}
        return interpolated


# ---------------------------------------------------------------------------
# Settings Class
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Client settings loaded from a YAML file and environment variables.

    Nested values are set from the environment with a double underscore,
    e.g. ``MYSTBIN_API__BASE_URL`` or ``MYSTBIN_LOGGING__LEVEL``.

    Attributes:
        api: API connection settings.
        logging: Logging settings.
    """

    model_config = SettingsConfigDict(
        yaml_file=None,
        yaml_file_encoding="utf-8",
        env_prefix="MYSTBIN_",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    CONFIG_SEARCH_PATHS: ClassVar[list[Path]] = [
        Path("mystbin.yaml"),
        Path("mystbin.yml"),
        Path.home() / ".config" / "mystbin" / "config.yaml",
    ]

    # Set by load_settings() for the duration of one instantiation
    _yaml_file_override: ClassVar[Path | str | None] = None

    api: ApiConfig = ApiConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="after")
    def resolve_token(self) -> Settings:
        """Resolve the API token.

        Resolution order: ``api.token``, then the contents of
        ``api.token_file``, then the ``MYSTBIN_TOKEN`` environment variable.

        Raises:
            ValueError: If token_file is set but does not exist.
        """
        if self.api.token:
            return self

        if self.api.token_file:
            token_path = self.api.token_file
            if not token_path.is_file():
                msg = f"Token file not found: {token_path}"
                raise ValueError(msg)
            object.__setattr__(self.api, "token", token_path.read_text().strip())
            return self

        env_token = os.environ.get("MYSTBIN_TOKEN")
        if env_token:
            object.__setattr__(self.api, "token", env_token)

        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order sources as init, environment, YAML, file secrets.

        dotenv is not used.
        """
        return (
            init_settings,
            env_settings,
            _InterpolatingYamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._yaml_file_override,
            ),
            file_secret_settings,
        )


# ---------------------------------------------------------------------------
# Settings Loading Functions
# ---------------------------------------------------------------------------


def find_config_file(config_path: Path | str | None = None) -> Path | None:
    """Find the configuration file.

    Args:
        config_path: Explicit path, or None to search the default locations
            (./mystbin.yaml, ./mystbin.yml, ~/.config/mystbin/config.yaml).

    Returns:
        Path to the config file if found, None otherwise.
    """
    if config_path is not None:
        path = Path(config_path)
        return path if path.is_file() else None

    for search_path in Settings.CONFIG_SEARCH_PATHS:
        if search_path.is_file():
            return search_path

    return None


def load_settings(
    config_path: Path | str | None = None,
    *,
    require_config_file: bool = False,
) -> Settings:
    """Load and validate settings.

    Args:
        config_path: Path to a YAML config file. If None, the default
            locations are searched.
        require_config_file: If True, fail when no config file is found.
            An explicit ``config_path`` that does not exist always fails.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationFileNotFoundError: If a required or explicitly named
            config file is missing.
        ConfigurationValidationError: If validation fails.
    """
    config_file = find_config_file(config_path)

    if config_file is None and (require_config_file or config_path is not None):
        raise ConfigurationFileNotFoundError(
            path=str(config_path) if config_path else None,
            searched_paths=[str(p) for p in Settings.CONFIG_SEARCH_PATHS],
        )

    Settings._yaml_file_override = config_file  # noqa: SLF001
    try:
        settings = Settings()
    except ValidationError as exc:
        msg = f"Failed to load configuration: {exc}"
        raise ConfigurationValidationError(
            msg,
            errors=[dict(error) for error in exc.errors()],
        ) from exc
    except Exception as exc:
        msg = f"Failed to load configuration: {exc}"
        raise ConfigurationValidationError(msg) from exc
    finally:
        Settings._yaml_file_override = None  # noqa: SLF001

    return settings
