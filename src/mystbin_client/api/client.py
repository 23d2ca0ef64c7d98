"""Blocking and asyncio facades for the mystb.in API.

Four entry points share one operation core (:mod:`mystbin_client.api.operations`):

- :class:`Client` / :class:`SyncClient`: start without a token and can be
  upgraded in place with :meth:`~Client.auth`.
- :class:`AuthClient` / :class:`SyncAuthClient`: validate their token against
  ``/users/@me`` before they can be used.

Every operation returns its success value or an
:class:`~mystbin_client.api.models.APIError`. Exceptions are reserved for
configuration mistakes and network or decode failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

import httpx
import structlog

from mystbin_client.api import operations
from mystbin_client.api.builders import (
    GetPasteBuilder,
    MultiPasteBuilder,
    PasteBuilder,
    UserPastesOptions,
    resolve_builder,
)
from mystbin_client.api.exceptions import (
    AuthenticationRequiredError,
    InvalidTokenError,
    MystbinConfigurationError,
    MystbinError,
)
from mystbin_client.api.models import APIError, DeleteResult, Paste, UserPaste
from mystbin_client.api.transport import (
    DEFAULT_BASE_URL,
    AsyncTransport,
    RawResponse,
    SyncTransport,
)


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from mystbin_client.api.operations import Operation
    from mystbin_client.config import Settings


__all__ = ["AuthClient", "Client", "SyncAuthClient", "SyncClient"]


type PasteInput = PasteBuilder | Callable[[PasteBuilder], PasteBuilder]
type MultiPasteInput = (
    MultiPasteBuilder | Callable[[MultiPasteBuilder], MultiPasteBuilder]
)
type GetPasteInput = (
    str | GetPasteBuilder | Callable[[GetPasteBuilder], GetPasteBuilder]
)
type OptionsInput = (
    UserPastesOptions | Callable[[UserPastesOptions], UserPastesOptions]
)


def _get_paste_builder(paste: GetPasteInput) -> GetPasteBuilder:
    if isinstance(paste, str):
        return GetPasteBuilder(paste)
    return resolve_builder(GetPasteBuilder, paste)


def _settings_options(settings: Settings) -> dict[str, Any]:
    """Translate loaded settings into facade constructor arguments."""
    return {
        "base_url": settings.api.base_url,
        "timeout": httpx.Timeout(
            settings.api.timeout,
            connect=settings.api.connect_timeout,
        ),
    }


class _FacadeMixin:
    """Token handling shared by all four facades."""

    _token: str | None

    @property
    def is_authenticated(self) -> bool:
        """Whether a validated token is attached."""
        return self._token is not None

    def _authorize(self, operation: Operation[Any]) -> None:
        if operation.requires_auth and self._token is None:
            raise AuthenticationRequiredError(operation.name)

    @staticmethod
    def _check_probe(response: RawResponse) -> None:
        if isinstance(operations.validate_token().reconcile(response), APIError):
            raise InvalidTokenError(response.status_code)


# ---------------------------------------------------------------------------
# Asyncio facades
# ---------------------------------------------------------------------------


class Client(_FacadeMixin):
    """Asyncio client for the mystb.in API.

    Without a token only the anonymous endpoints are usable; call
    :meth:`auth` to attach a token for the user endpoints.

    Example:
        ```python
        async with Client() as client:
            paste = await client.create_paste(
                lambda p: p.filename("hello.txt").content("Hello!")
            )
        ```
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the API.
            timeout: Optional custom timeout configuration.
            transport: Optional custom httpx transport for testing.
        """
        self._transport = AsyncTransport(base_url, timeout=timeout, transport=transport)
        self._token = None
        self._logger = structlog.get_logger(__name__)

    @classmethod
    async def from_settings(cls, settings: Settings) -> Self:
        """Create a client from settings, authenticating if a token is configured.

        Raises:
            InvalidTokenError: If the configured token is rejected.
        """
        client = cls(**_settings_options(settings))
        if settings.api.token:
            try:
                await client.auth(settings.api.token)
            except MystbinError:
                await client.aclose()
                raise
        return client

    async def __aenter__(self) -> Self:
        """Enter async context."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context and close the HTTP client."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client and release resources."""
        await self._transport.aclose()

    async def auth(self, token: str) -> Self:
        """Validate a token and attach it for all later calls.

        Raises:
            InvalidTokenError: If ``/users/@me`` does not answer 200. The
                client is left unauthenticated.
        """
        probe = operations.validate_token()
        response = await self._transport.send(probe.method, probe.path, token=token)
        self._check_probe(response)
        self._token = token
        self._logger.debug("token_validated")
        return self

    async def _execute[T](self, operation: Operation[T]) -> T | APIError:
        self._authorize(operation)
        response = await self._transport.send(
            operation.method,
            operation.path,
            token=self._token,
            json=operation.json,
            params=operation.params,
        )
        return operation.reconcile(response)

    async def create_paste(self, paste: PasteInput) -> Paste | APIError:
        """Create a single-file paste.

        Raises:
            InvalidExpiryError: If the expiry offset has a negative field.
        """
        request = resolve_builder(PasteBuilder, paste).build()
        return await self._execute(operations.create_paste(request))

    async def create_multifile_paste(self, pastes: MultiPasteInput) -> Paste | APIError:
        """Create a paste with several files.

        Only the first file's password and expiry are sent.
        """
        request = resolve_builder(MultiPasteBuilder, pastes).build()
        return await self._execute(operations.create_paste(request))

    async def get_paste(self, paste: GetPasteInput) -> Paste | APIError:
        """Fetch a paste by ID, with an optional password."""
        request = _get_paste_builder(paste).build()
        return await self._execute(operations.get_paste(request))

    async def delete_paste(self, paste_id: str) -> DeleteResult | APIError:
        """Delete a paste."""
        return await self._execute(operations.delete_paste(paste_id))

    async def delete_pastes(self, paste_ids: Sequence[str]) -> DeleteResult | APIError:
        """Delete several pastes, reporting which succeeded and which failed."""
        return await self._execute(operations.delete_pastes(paste_ids))

    async def get_user_pastes(
        self,
        options: OptionsInput | None = None,
    ) -> list[UserPaste] | None | APIError:
        """List the authenticated user's pastes.

        Raises:
            AuthenticationRequiredError: If no token is attached.
        """
        pagination = resolve_builder(UserPastesOptions, options).build()
        return await self._execute(operations.get_user_pastes(pagination))

    async def create_bookmark(self, paste_id: str) -> None | APIError:
        """Bookmark a paste for the authenticated user."""
        return await self._execute(operations.create_bookmark(paste_id))

    async def delete_bookmark(self, paste_id: str) -> None | APIError:
        """Remove a paste from the authenticated user's bookmarks."""
        return await self._execute(operations.delete_bookmark(paste_id))

    async def get_user_bookmarks(self) -> list[UserPaste] | None | APIError:
        """List the authenticated user's bookmarks."""
        return await self._execute(operations.get_user_bookmarks())


class AuthClient(Client):
    """Asyncio client that is always authenticated.

    The token is validated before the client can be used, either through
    :meth:`create` or by entering the client as an async context manager.

    Example:
        ```python
        async with AuthClient("YOUR_MYSTBIN_TOKEN") as client:
            result = await client.delete_paste("EquipmentMovingExpensive")

        client = await AuthClient.create("YOUR_MYSTBIN_TOKEN")
        ```
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client. The token is validated on first use.

        Args:
            token: mystb.in API token.
            base_url: Base URL of the API.
            timeout: Optional custom timeout configuration.
            transport: Optional custom httpx transport for testing.
        """
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self._pending_token = token

    @classmethod
    async def create(
        cls,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Self:
        """Create a client and validate its token.

        Raises:
            InvalidTokenError: If the token is rejected.
        """
        client = cls(token, base_url=base_url, timeout=timeout, transport=transport)
        await client._validate()  # noqa: SLF001
        return client

    @classmethod
    async def from_settings(cls, settings: Settings) -> Self:
        """Create a validated client from settings.

        Raises:
            MystbinConfigurationError: If no token is configured.
            InvalidTokenError: If the configured token is rejected.
        """
        if not settings.api.token:
            msg = "No API token configured"
            raise MystbinConfigurationError(msg)
        client = cls(settings.api.token, **_settings_options(settings))
        await client._validate()  # noqa: SLF001
        return client

    async def __aenter__(self) -> Self:
        """Validate the token on context entry."""
        await self._validate()
        return self

    async def _validate(self) -> None:
        if self._token is not None:
            return
        try:
            await self.auth(self._pending_token)
        except MystbinError:
            await self.aclose()
            raise

    async def _execute[T](self, operation: Operation[T]) -> T | APIError:
        if self._token is None:
            msg = "AuthClient must be validated with 'await AuthClient.create()' first"
            raise MystbinConfigurationError(msg)
        return await super()._execute(operation)


# ---------------------------------------------------------------------------
# Blocking facades
# ---------------------------------------------------------------------------


class SyncClient(_FacadeMixin):
    """Blocking client for the mystb.in API.

    Same operations and results as :class:`Client`, without ``await``.

    Example:
        ```python
        with SyncClient() as client:
            paste = client.get_paste(lambda p: p.id("SpecificsBillionComponent"))
        ```
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: httpx.Timeout | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the API.
            timeout: Optional custom timeout configuration.
            transport: Optional custom httpx transport for testing.
        """
        self._transport = SyncTransport(base_url, timeout=timeout, transport=transport)
        self._token = None
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        """Create a client from settings, authenticating if a token is configured.

        Raises:
            InvalidTokenError: If the configured token is rejected.
        """
        client = cls(**_settings_options(settings))
        if settings.api.token:
            try:
                client.auth(settings.api.token)
            except MystbinError:
                client.close()
                raise
        return client

    def __enter__(self) -> Self:
        """Enter context."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context and close the HTTP client."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._transport.close()

    def auth(self, token: str) -> Self:
        """Validate a token and attach it for all later calls.

        Raises:
            InvalidTokenError: If ``/users/@me`` does not answer 200. The
                client is left unauthenticated.
        """
        probe = operations.validate_token()
        response = self._transport.send(probe.method, probe.path, token=token)
        self._check_probe(response)
        self._token = token
        self._logger.debug("token_validated")
        return self

    def _execute[T](self, operation: Operation[T]) -> T | APIError:
        self._authorize(operation)
        response = self._transport.send(
            operation.method,
            operation.path,
            token=self._token,
            json=operation.json,
            params=operation.params,
        )
        return operation.reconcile(response)

    def create_paste(self, paste: PasteInput) -> Paste | APIError:
        """Create a single-file paste.

        Raises:
            InvalidExpiryError: If the expiry offset has a negative field.
        """
        request = resolve_builder(PasteBuilder, paste).build()
        return self._execute(operations.create_paste(request))

    def create_multifile_paste(self, pastes: MultiPasteInput) -> Paste | APIError:
        """Create a paste with several files.

        Only the first file's password and expiry are sent.
        """
        request = resolve_builder(MultiPasteBuilder, pastes).build()
        return self._execute(operations.create_paste(request))

    def get_paste(self, paste: GetPasteInput) -> Paste | APIError:
        """Fetch a paste by ID, with an optional password."""
        request = _get_paste_builder(paste).build()
        return self._execute(operations.get_paste(request))

    def delete_paste(self, paste_id: str) -> DeleteResult | APIError:
        """Delete a paste."""
        return self._execute(operations.delete_paste(paste_id))

    def delete_pastes(self, paste_ids: Sequence[str]) -> DeleteResult | APIError:
        """Delete several pastes, reporting which succeeded and which failed."""
        return self._execute(operations.delete_pastes(paste_ids))

    def get_user_pastes(
        self,
        options: OptionsInput | None = None,
    ) -> list[UserPaste] | None | APIError:
        """List the authenticated user's pastes.

        Raises:
            AuthenticationRequiredError: If no token is attached.
        """
        pagination = resolve_builder(UserPastesOptions, options).build()
        return self._execute(operations.get_user_pastes(pagination))

    def create_bookmark(self, paste_id: str) -> None | APIError:
        """Bookmark a paste for the authenticated user."""
        return self._execute(operations.create_bookmark(paste_id))

    def delete_bookmark(self, paste_id: str) -> None | APIError:
        """Remove a paste from the authenticated user's bookmarks."""
        return self._execute(operations.delete_bookmark(paste_id))

    def get_user_bookmarks(self) -> list[UserPaste] | None | APIError:
        """List the authenticated user's bookmarks."""
        return self._execute(operations.get_user_bookmarks())


class SyncAuthClient(SyncClient):
    """Blocking client whose token is validated during construction.

    Example:
        ```python
        with SyncAuthClient("YOUR_MYSTBIN_TOKEN") as client:
            pastes = client.get_user_pastes(lambda o: o.limit(10))
        ```
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: httpx.Timeout | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client and validate the token.

        Args:
            token: mystb.in API token.
            base_url: Base URL of the API.
            timeout: Optional custom timeout configuration.
            transport: Optional custom httpx transport for testing.

        Raises:
            InvalidTokenError: If the token is rejected.
        """
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        try:
            self.auth(token)
        except MystbinError:
            self.close()
            raise

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        """Create a validated client from settings.

        Raises:
            MystbinConfigurationError: If no token is configured.
            InvalidTokenError: If the configured token is rejected.
        """
        if not settings.api.token:
            msg = "No API token configured"
            raise MystbinConfigurationError(msg)
        return cls(settings.api.token, **_settings_options(settings))
