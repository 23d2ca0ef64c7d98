"""Pydantic models for mystb.in request and response values."""

from __future__ import annotations

import re
from datetime import datetime  # noqa: TC003
from typing import Annotated, Any, Self

from pydantic import (
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)


__all__ = [
    "APIError",
    "BookmarksBody",
    "CreatedPasteBody",
    "DeleteReportBody",
    "DeleteResult",
    "ErrorBody",
    "Expiry",
    "FetchedPasteBody",
    "File",
    "PartialFile",
    "Paste",
    "Timestamp",
    "UserPaste",
    "UserPastesBody",
]


# Date, "T" (or space), time with optional fraction, and a mandatory offset.
_RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


def _require_rfc3339(value: object) -> object:
    """Accept datetimes as-is and only RFC 3339 strings with an offset."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _RFC3339_PATTERN.match(value):
        msg = f"Invalid RFC 3339 timestamp: {value!r}"
        raise ValueError(msg)  # noqa: TRY004
    return value.upper().replace(" ", "T")


type Timestamp = Annotated[AwareDatetime, BeforeValidator(_require_rfc3339)]
"""Timezone-aware datetime that only parses strict RFC 3339 strings."""


class MystbinBaseModel(BaseModel):
    """Base model with common configuration for all mystb.in values.

    Every value is immutable once constructed and compares by value.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",  # Ignore unknown fields from API
    )


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


class File(MystbinBaseModel):
    """A single named file inside a paste."""

    filename: str
    content: str


class Expiry(MystbinBaseModel):
    """When a paste should expire.

    Either a relative offset from the moment the request is sent, or an
    absolute timestamp. Offsets are validated when the request is built,
    not here, so a negative field is only reported once the expiry is used.

    Example:
        ```python
        Expiry(days=1)  # 24 hours after the request
        Expiry(hours=2, minutes=30)
        Expiry.absolute(datetime(2030, 1, 1, tzinfo=UTC))
        ```

    Attributes:
        days: Days to add to the reference instant.
        hours: Hours to add to the reference instant.
        minutes: Minutes to add to the reference instant.
        seconds: Seconds to add to the reference instant.
        timestamp: Absolute expiry; when set the offset fields are ignored.
    """

    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    timestamp: datetime | None = None

    @classmethod
    def absolute(cls, timestamp: datetime) -> Self:
        """Create an expiry at a fixed point in time."""
        return cls(timestamp=timestamp)

    @property
    def is_relative(self) -> bool:
        """Whether this expiry is an offset rather than a timestamp."""
        return self.timestamp is None

    @property
    def is_zero(self) -> bool:
        """Whether this is the all-zero offset, which means no expiry."""
        return self.is_relative and not (
            self.days or self.hours or self.minutes or self.seconds
        )


class Paste(MystbinBaseModel):
    """A paste returned by the create and get operations.

    Attributes:
        id: Server-assigned paste ID.
        created_at: Creation time reported by the server.
        expires: Expiry time, or None if the paste does not expire.
        files: Files in the order the server (or the request) listed them.
    """

    id: str
    created_at: Timestamp
    expires: Timestamp | None = None
    files: tuple[File, ...] = ()


class UserPaste(MystbinBaseModel):
    """Summary of a paste owned or bookmarked by the current user.

    Unlike :class:`Paste` this does not carry the file bodies.
    """

    id: str
    created_at: Timestamp
    expires: Timestamp | None = None


class DeleteResult(MystbinBaseModel):
    """Outcome of deleting one or more pastes.

    Attributes:
        succeeded: IDs that were deleted, or None if not reported.
        failed: IDs that could not be deleted, or None if not reported.
    """

    succeeded: frozenset[str] | None = None
    failed: frozenset[str] | None = None


class APIError(MystbinBaseModel):
    """A non-success response from the API.

    Operations return this instead of raising, so callers can branch on
    ``isinstance(result, APIError)``. Each of ``message``, ``notice`` and
    ``detail`` is only present when the server sent it.

    Attributes:
        code: HTTP status code.
        message: The ``error`` field of the response body.
        notice: The ``notice`` field of the response body.
        detail: The ``detail`` field of the response body, if it was an object.
    """

    code: int
    message: str | None = Field(default=None, alias="error")
    notice: str | None = None
    detail: dict[str, Any] | None = None

    def __str__(self) -> str:
        """Return the status code with the message when present."""
        if self.message:
            return f"{self.code}: {self.message}"
        return str(self.code)


# ---------------------------------------------------------------------------
# Response bodies
# ---------------------------------------------------------------------------


class PartialFile(MystbinBaseModel):
    """A file as echoed by the create endpoint, possibly without its body."""

    filename: str | None = None
    content: str | None = None


class _PasteBody(MystbinBaseModel):
    created_at: Timestamp
    expires: Timestamp | None = None


class CreatedPasteBody(_PasteBody):
    """Success body of ``PUT /paste``.

    ``files`` is only present when the server echoes them back.
    """

    id: str
    files: list[PartialFile] | None = None


class FetchedPasteBody(_PasteBody):
    """Success body of ``GET /paste/{id}``."""

    id: str | None = None
    files: list[File]


class UserPastesBody(MystbinBaseModel):
    """Success body of ``GET /pastes/@me``."""

    pastes: list[UserPaste] | None = None


class BookmarksBody(MystbinBaseModel):
    """Success body of ``GET /users/bookmarks``."""

    bookmarks: list[UserPaste] | None = None


class DeleteReportBody(MystbinBaseModel):
    """Success body of ``DELETE /paste``.

    At least one of the two lists must be present, even if null.
    """

    succeeded: list[str] | None = None
    failed: list[str] | None = None

    @model_validator(mode="after")
    def require_report(self) -> Self:
        """Reject a body that reports neither succeeded nor failed IDs."""
        if not self.model_fields_set & {"succeeded", "failed"}:
            msg = "Response does not report succeeded or failed IDs"
            raise ValueError(msg)
        return self

    def to_result(self) -> DeleteResult:
        """Convert the report into a :class:`DeleteResult`."""
        return DeleteResult(
            succeeded=None if self.succeeded is None else frozenset(self.succeeded),
            failed=None if self.failed is None else frozenset(self.failed),
        )


class ErrorBody(MystbinBaseModel):
    """Body of a non-success response.

    Each field is kept only when it has the expected type; anything else
    is dropped rather than failing the whole body.
    """

    error: str | None = None
    notice: str | None = None
    detail: dict[str, Any] | None = None

    @field_validator("error", "notice", "detail", mode="wrap")
    @classmethod
    def drop_invalid(
        cls,
        value: object,
        handler: ValidatorFunctionWrapHandler,
    ) -> object:
        """Replace a wrongly typed field with None."""
        try:
            return handler(value)
        except ValidationError:
            return None

    def to_error(self, status_code: int) -> APIError:
        """Build the :class:`APIError` for this body."""
        return APIError(
            code=status_code,
            message=self.error,
            notice=self.notice,
            detail=self.detail,
        )
