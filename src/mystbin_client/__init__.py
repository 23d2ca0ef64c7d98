"""mystbin-client: typed blocking and asyncio client for the mystb.in paste API."""

from __future__ import annotations

from mystbin_client.api import (
    APIError,
    AuthClient,
    AuthenticationRequiredError,
    Client,
    DeleteResult,
    Expiry,
    File,
    GetPasteBuilder,
    InvalidExpiryError,
    InvalidTokenError,
    MultiPasteBuilder,
    MystbinConfigurationError,
    MystbinConnectionError,
    MystbinDecodeError,
    MystbinError,
    MystbinTransportError,
    Paste,
    PasteBuilder,
    SyncAuthClient,
    SyncClient,
    UserPaste,
    UserPastesOptions,
)


__version__ = "0.1.0"

__all__ = [
    "APIError",
    "AuthClient",
    "AuthenticationRequiredError",
    "Client",
    "DeleteResult",
    "Expiry",
    "File",
    "GetPasteBuilder",
    "InvalidExpiryError",
    "InvalidTokenError",
    "MultiPasteBuilder",
    "MystbinConfigurationError",
    "MystbinConnectionError",
    "MystbinDecodeError",
    "MystbinError",
    "MystbinTransportError",
    "Paste",
    "PasteBuilder",
    "SyncAuthClient",
    "SyncClient",
    "UserPaste",
    "UserPastesOptions",
    "__version__",
]
