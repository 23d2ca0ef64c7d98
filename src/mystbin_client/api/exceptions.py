"""Exceptions raised by the mystb.in API client.

Only conditions the caller cannot recover from are raised. Non-success
responses from the API are returned as :class:`~mystbin_client.api.models.APIError`
values instead.
"""

from __future__ import annotations


__all__ = [
    "AuthenticationRequiredError",
    "InvalidExpiryError",
    "InvalidTokenError",
    "MystbinConfigurationError",
    "MystbinConnectionError",
    "MystbinDecodeError",
    "MystbinError",
    "MystbinTransportError",
]


class MystbinError(Exception):
    """Base exception for all mystb.in client errors.

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


# ---------------------------------------------------------------------------
# Configuration errors (raised before any request is sent)
# ---------------------------------------------------------------------------


class MystbinConfigurationError(MystbinError):
    """Raised when the client or a request is configured incorrectly.

    These errors abort the call before any network I/O and are never
    retryable.
    """


class InvalidTokenError(MystbinConfigurationError):
    """Raised when the token validation probe does not return 200.

    Attributes:
        status_code: Status returned by the ``/users/@me`` probe.
    """

    def __init__(self, status_code: int) -> None:
        """Initialize the error.

        Args:
            status_code: Status returned by the probe.
        """
        super().__init__(f"The provided token is invalid (status={status_code})")
        self.status_code = status_code


class InvalidExpiryError(MystbinConfigurationError):
    """Raised when a relative expiry offset cannot be encoded.

    That is either a negative field, or an offset too large to add to the
    reference instant.

    Attributes:
        field: Name of the offending field (days, hours, minutes, seconds),
            or ``offset`` for the combined offset.
        value: The offending value.
    """

    def __init__(
        self,
        field: str,
        value: int,
        reason: str = "can not be negative",
    ) -> None:
        """Initialize the error.

        Args:
            field: Name of the offending field.
            value: The offending value.
            reason: What is wrong with the value.
        """
        super().__init__(f"{field} {reason}, value: {value}")
        self.field = field
        self.value = value


class AuthenticationRequiredError(MystbinConfigurationError):
    """Raised when a user-scoped operation is called without a token."""

    def __init__(self, operation: str) -> None:
        """Initialize the error.

        Args:
            operation: Name of the operation that needs a token.
        """
        super().__init__(f"{operation} requires an authenticated client")
        self.operation = operation


# ---------------------------------------------------------------------------
# Transport and decode errors (unexpected contract violations)
# ---------------------------------------------------------------------------


class MystbinTransportError(MystbinError):
    """Base class for network failures and malformed success responses."""


class MystbinConnectionError(MystbinTransportError):
    """Raised when the request could not be completed.

    This includes DNS failures, refused connections and timeouts.
    """

    def __init__(
        self,
        message: str = "Failed to connect to mystb.in",
        *,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error description.
            cause: The underlying httpx exception.
        """
        super().__init__(message)
        self.__cause__ = cause


class MystbinDecodeError(MystbinTransportError):
    """Raised when a success response cannot be decoded.

    Examples are a missing JSON body where one is required, a missing
    required field, or a timestamp that is not valid RFC 3339.
    """
