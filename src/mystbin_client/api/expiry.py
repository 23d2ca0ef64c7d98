"""Expiry encoding and strict timestamp parsing.

The API expects RFC 3339 timestamps at second precision. Some deployments
reject the ``Z`` suffix, so encoded values always carry an explicit
``+00:00`` offset. Timestamps read back from the server may use either form.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import TypeAdapter, ValidationError

from mystbin_client.api.exceptions import InvalidExpiryError, MystbinDecodeError
from mystbin_client.api.models import Expiry, Timestamp


__all__ = [
    "encode_expiry",
    "format_timestamp",
    "parse_timestamp",
    "validate_expiry",
]


_TIMESTAMP_ADAPTER: TypeAdapter[datetime] = TypeAdapter(Timestamp)

_OFFSET_FIELDS = ("days", "hours", "minutes", "seconds")


def validate_expiry(expiry: Expiry) -> None:
    """Check that every relative offset field is non-negative.

    Fields are checked in the order days, hours, minutes, seconds and the
    first negative one is reported.

    Args:
        expiry: The expiry to check.

    Raises:
        InvalidExpiryError: If an offset field is negative.
    """
    if not expiry.is_relative:
        return
    for field in _OFFSET_FIELDS:
        value: int = getattr(expiry, field)
        if value < 0:
            raise InvalidExpiryError(field, value)


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp in the wire format.

    Naive datetimes are taken to be UTC.

    Args:
        value: The timestamp to serialize.

    Returns:
        RFC 3339 string in UTC with an explicit ``+00:00`` suffix.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="seconds")


def encode_expiry(
    expiry: Expiry | None,
    *,
    now: datetime | None = None,
) -> str | None:
    """Encode an expiry for the ``expires`` request field.

    Args:
        expiry: The expiry to encode, or None for no expiry.
        now: Reference instant for relative offsets (default: current UTC time).

    Returns:
        The encoded timestamp, or None when the paste should not expire
        (no expiry given, or an all-zero offset).

    Raises:
        InvalidExpiryError: If a relative offset field is negative, or the
            offset lands outside the representable date range.

    Example:
        >>> encode_expiry(Expiry(days=1), now=datetime(2024, 1, 1, tzinfo=UTC))
        '2024-01-02T00:00:00+00:00'
        >>> encode_expiry(Expiry()) is None
        True
    """
    if expiry is None:
        return None

    validate_expiry(expiry)

    if expiry.timestamp is not None:
        return format_timestamp(expiry.timestamp)

    # An all-zero offset would otherwise expire the paste immediately
    if expiry.is_zero:
        return None

    reference = now if now is not None else datetime.now(UTC)
    try:
        expires_at = reference + timedelta(
            days=expiry.days,
            hours=expiry.hours,
            minutes=expiry.minutes,
            seconds=expiry.seconds,
        )
    except OverflowError as exc:
        total = (
            expiry.days * 86400
            + expiry.hours * 3600
            + expiry.minutes * 60
            + expiry.seconds
        )
        raise InvalidExpiryError("offset", total, "is out of range") from exc
    return format_timestamp(expires_at)


def parse_timestamp(value: object) -> datetime:
    """Parse a timestamp returned by the server.

    Args:
        value: The raw JSON value.

    Returns:
        Timezone-aware datetime.

    Raises:
        MystbinDecodeError: If the value is not an RFC 3339 string with an offset.
    """
    try:
        return _TIMESTAMP_ADAPTER.validate_python(value)
    except ValidationError as exc:
        msg = f"Invalid RFC 3339 timestamp from server: {value!r}"
        raise MystbinDecodeError(msg) from exc
