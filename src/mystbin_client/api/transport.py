"""HTTP transport adapters for the mystb.in API.

Both adapters turn a request into a :class:`RawResponse` holding the status
code and the decoded JSON body. They never interpret the status; that is
left to :mod:`mystbin_client.api.operations`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from mystbin_client.api.exceptions import MystbinConnectionError


if TYPE_CHECKING:
    from collections.abc import Mapping


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "AsyncTransport",
    "RawResponse",
    "SyncTransport",
]


DEFAULT_BASE_URL = "https://api.mystb.in"
DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status code and decoded body of an API response.

    Attributes:
        status_code: The HTTP status code.
        json_body: The decoded JSON body, or None for an empty or non-JSON body.
    """

    status_code: int
    json_body: Any | None = None


class _BaseTransport:
    """Header construction, body decoding and logging shared by both adapters."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: httpx.Timeout | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._logger = structlog.get_logger(__name__)

    @staticmethod
    def _headers(token: str | None) -> dict[str, str]:
        """Build request headers, with a bearer credential only if a token is set."""
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _decode(response: httpx.Response) -> Any | None:  # noqa: ANN401
        """Decode the body as JSON, returning None if it is empty or not JSON."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _finish(
        self,
        log: structlog.typing.FilteringBoundLogger,
        response: httpx.Response,
    ) -> RawResponse:
        log.debug(
            "api_response",
            status_code=response.status_code,
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )
        return RawResponse(
            status_code=response.status_code,
            json_body=self._decode(response),
        )

    def _connection_error(
        self,
        log: structlog.typing.FilteringBoundLogger,
        exc: httpx.TransportError,
    ) -> MystbinConnectionError:
        if isinstance(exc, httpx.TimeoutException):
            log.warning("timeout_error", error=str(exc))
            return MystbinConnectionError("Request timed out", cause=exc)
        log.warning("connection_error", error=str(exc))
        return MystbinConnectionError(cause=exc)


class SyncTransport(_BaseTransport):
    """Blocking transport backed by a pooled :class:`httpx.Client`.

    The underlying client is thread-safe, so one transport can serve
    concurrent calls from several threads.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: httpx.Timeout | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Base URL of the API.
            timeout: Optional custom timeout configuration.
            transport: Optional custom httpx transport for testing.
        """
        super().__init__(base_url, timeout=timeout)
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying client and release pooled connections."""
        self._client.close()

    def send(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: Any | None = None,  # noqa: ANN401
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        """Send a request and block until the response arrives.

        Args:
            method: HTTP method (GET, PUT, DELETE).
            path: Endpoint path relative to the base URL.
            token: Bearer token, or None for an anonymous request.
            json: JSON body, or None to send no body.
            params: Query parameters.

        Returns:
            The status code and decoded body.

        Raises:
            MystbinConnectionError: On any network failure or timeout.
        """
        log = self._logger.bind(method=method, path=path)
        log.debug("api_request", authenticated=token is not None)
        try:
            response = self._client.request(
                method,
                path,
                json=json,
                params=dict(params) if params else None,
                headers=self._headers(token),
            )
        except httpx.TransportError as exc:
            raise self._connection_error(log, exc) from exc
        return self._finish(log, response)


class AsyncTransport(_BaseTransport):
    """Non-blocking transport backed by a pooled :class:`httpx.AsyncClient`.

    Calls suspend only while waiting on the network, and any number of them
    may be in flight on the same transport.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Base URL of the API.
            timeout: Optional custom timeout configuration.
            transport: Optional custom httpx transport for testing.
        """
        super().__init__(base_url, timeout=timeout)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying client and release pooled connections."""
        await self._client.aclose()

    async def send(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: Any | None = None,  # noqa: ANN401
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        """Send a request, suspending until the response arrives.

        Args:
            method: HTTP method (GET, PUT, DELETE).
            path: Endpoint path relative to the base URL.
            token: Bearer token, or None for an anonymous request.
            json: JSON body, or None to send no body.
            params: Query parameters.

        Returns:
            The status code and decoded body.

        Raises:
            MystbinConnectionError: On any network failure or timeout.
        """
        log = self._logger.bind(method=method, path=path)
        log.debug("api_request", authenticated=token is not None)
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=dict(params) if params else None,
                headers=self._headers(token),
            )
        except httpx.TransportError as exc:
            raise self._connection_error(log, exc) from exc
        return self._finish(log, response)
