"""Fluent request builders.

Builders are mutable accumulators: every setter stores a value and returns
the builder, so calls chain. Nothing is validated until :meth:`build`, which
produces a frozen request payload. Facade methods accept either a builder
or a callback that configures a fresh one:

```python
client.create_paste(lambda p: p.filename("a.txt").content("hello"))

builder = PasteBuilder().filename("a.txt").content("hello")
client.create_paste(builder)
```
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict

from mystbin_client.api.exceptions import MystbinConfigurationError
from mystbin_client.api.expiry import encode_expiry
from mystbin_client.api.models import Expiry, File


__all__ = [
    "CreatePasteRequest",
    "GetPasteBuilder",
    "GetPasteRequest",
    "MultiPasteBuilder",
    "PaginationRequest",
    "PasteBuilder",
    "UserPastesOptions",
    "resolve_builder",
]


# ---------------------------------------------------------------------------
# Finalized payloads
# ---------------------------------------------------------------------------


class _RequestModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class CreatePasteRequest(_RequestModel):
    """Finalized body of ``PUT /paste``.

    Attributes:
        files: Files in request order.
        password: Paste password, sent as null when unset.
        expires: Encoded expiry, sent as null when the paste should not expire.
    """

    files: tuple[File, ...]
    password: str | None = None
    expires: str | None = None

    def to_json(self) -> dict[str, Any]:
        """Return the JSON body for the request."""
        return self.model_dump(mode="json")


class GetPasteRequest(_RequestModel):
    """Finalized parameters of ``GET /paste/{id}``."""

    id: str
    password: str | None = None

    def to_params(self) -> dict[str, str]:
        """Return the query parameters, omitting an unset password."""
        if self.password is None:
            return {}
        return {"password": self.password}


class PaginationRequest(_RequestModel):
    """Finalized pagination parameters."""

    limit: int = 50
    page: int = 1

    def to_params(self) -> dict[str, int]:
        """Return the query parameters."""
        return {"limit": self.limit, "page": self.page}


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class PasteBuilder:
    """Builder for a single-file paste, or one file of a multi-file paste."""

    def __init__(self) -> None:
        self._filename = ""
        self._content = ""
        self._password: str | None = None
        self._expires: Expiry | None = None

    def filename(self, filename: str) -> Self:
        """Set the file name."""
        self._filename = filename
        return self

    def content(self, content: str) -> Self:
        """Set the file content."""
        self._content = content
        return self

    def password(self, password: str) -> Self:
        """(optional) Set the paste password."""
        self._password = password
        return self

    def expires(self, expires: Expiry | datetime) -> Self:
        """(optional) Set the expiry as an offset or an absolute timestamp."""
        if isinstance(expires, datetime):
            expires = Expiry.absolute(expires)
        self._expires = expires
        return self

    @property
    def password_value(self) -> str | None:
        """The configured password, if any."""
        return self._password

    @property
    def expiry_value(self) -> Expiry | None:
        """The configured expiry, if any."""
        return self._expires

    def to_file(self) -> File:
        """Return the configured file."""
        return File(filename=self._filename, content=self._content)

    def build(self, *, now: datetime | None = None) -> CreatePasteRequest:
        """Finalize into a request payload.

        Args:
            now: Reference instant for a relative expiry.

        Raises:
            InvalidExpiryError: If the expiry offset has a negative field.
        """
        return CreatePasteRequest(
            files=(self.to_file(),),
            password=self._password,
            expires=encode_expiry(self._expires, now=now),
        )


class MultiPasteBuilder:
    """Builder for a paste with several files.

    The API takes a single password and expiry per paste, so only the ones
    set on the first file are sent; those set on later files are ignored.
    """

    def __init__(self) -> None:
        self._files: list[PasteBuilder] = []

    def file(
        self,
        paste: PasteBuilder | Callable[[PasteBuilder], PasteBuilder],
    ) -> Self:
        """Append a file, given as a builder or a configuring callback."""
        self._files.append(resolve_builder(PasteBuilder, paste))
        return self

    def build(self, *, now: datetime | None = None) -> CreatePasteRequest:
        """Finalize into a request payload.

        Args:
            now: Reference instant for a relative expiry.

        Raises:
            MystbinConfigurationError: If no file was added.
            InvalidExpiryError: If the first file's expiry offset is negative.
        """
        if not self._files:
            msg = "A multi-file paste needs at least one file"
            raise MystbinConfigurationError(msg)
        first = self._files[0]
        return CreatePasteRequest(
            files=tuple(builder.to_file() for builder in self._files),
            password=first.password_value,
            expires=encode_expiry(first.expiry_value, now=now),
        )


class GetPasteBuilder:
    """Builder for fetching a paste."""

    def __init__(self, paste_id: str = "") -> None:
        self._id = paste_id
        self._password: str | None = None

    def id(self, paste_id: str) -> Self:
        """Set the ID of the paste."""
        self._id = paste_id
        return self

    def password(self, password: str) -> Self:
        """(optional) Set the password of the paste."""
        self._password = password
        return self

    def build(self) -> GetPasteRequest:
        """Finalize into request parameters.

        Raises:
            MystbinConfigurationError: If no ID was set.
        """
        if not self._id:
            msg = "A paste ID is required"
            raise MystbinConfigurationError(msg)
        return GetPasteRequest(id=self._id, password=self._password)


class UserPastesOptions:
    """Pagination options for listing the user's pastes."""

    def __init__(self) -> None:
        self._limit = 50
        self._page = 1

    def limit(self, limit: int) -> Self:
        """Set the number of pastes per page. Defaults to 50."""
        self._limit = limit
        return self

    def page(self, page: int) -> Self:
        """Set the page number. Defaults to 1."""
        self._page = page
        return self

    def build(self) -> PaginationRequest:
        """Finalize into request parameters."""
        return PaginationRequest(limit=self._limit, page=self._page)


def resolve_builder[B](
    builder_cls: type[B],
    value: B | Callable[[B], B] | None,
) -> B:
    """Turn a facade argument into a configured builder.

    Args:
        builder_cls: Builder class used when a callback or None is given.
        value: A builder instance, a callback that configures a fresh builder,
            or None for a default builder.

    Returns:
        The configured builder.
    """
    if value is None:
        return builder_cls()
    if isinstance(value, builder_cls):
        return value
    configure: Callable[[B], B] = value  # type: ignore[assignment]
    builder = builder_cls()
    configured = configure(builder)
    # Callbacks that mutate without returning the builder are accepted too
    return builder if configured is None else configured
