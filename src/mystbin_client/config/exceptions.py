"""Configuration-specific exceptions for mystbin-client."""

from __future__ import annotations


__all__ = [
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
]


class ConfigurationError(Exception):
    """Base exception for settings loading errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
        self.message = message


class ConfigurationFileNotFoundError(ConfigurationError):
    """Raised when a required configuration file cannot be found.

    Attributes:
        path: The path that was requested, if any.
        searched_paths: Paths that were searched.
    """

    def __init__(
        self,
        path: str | None = None,
        searched_paths: list[str] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            path: The specific path requested, or None if searching defaults.
            searched_paths: List of paths that were searched.
        """
        self.path = path
        self.searched_paths = searched_paths or []

        if path:
            message = f"Configuration file not found: {path}"
        elif self.searched_paths:
            message = (
                "Configuration file not found. Searched: "
                f"{', '.join(self.searched_paths)}"
            )
        else:
            message = "Configuration file not found"

        super().__init__(message)


class ConfigurationValidationError(ConfigurationError):
    """Raised when loaded settings fail validation.

    Attributes:
        errors: Validation error details reported by Pydantic.
    """

    def __init__(
        self,
        message: str,
        errors: list[dict[str, object]] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Summary of the validation failure.
            errors: Validation error details.
        """
        super().__init__(message)
        self.errors = errors or []
