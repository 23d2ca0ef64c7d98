"""mystb.in API client module.

This module provides blocking and asyncio clients for the mystb.in paste
API, the fluent request builders they accept, and the value types they
return.

Example:
    ```python
    from mystbin_client.api import APIError, AuthClient, Expiry

    async with AuthClient("your-api-token") as client:
        paste = await client.create_multifile_paste(
            lambda p: p.file(
                lambda f: f.filename("a.py").content("print(1)").password("hunter2")
            ).file(lambda f: f.filename("b.py").content("print(2)"))
        )
        if isinstance(paste, APIError):
            raise SystemExit(f"Error code: {paste.code}")

        await client.create_bookmark(paste.id)
        for bookmark in await client.get_user_bookmarks() or []:
            print(bookmark.id, bookmark.expires)
    ```
"""

from __future__ import annotations

from mystbin_client.api.builders import (
    GetPasteBuilder,
    MultiPasteBuilder,
    PasteBuilder,
    UserPastesOptions,
)
from mystbin_client.api.client import AuthClient, Client, SyncAuthClient, SyncClient
from mystbin_client.api.exceptions import (
    AuthenticationRequiredError,
    InvalidExpiryError,
    InvalidTokenError,
    MystbinConfigurationError,
    MystbinConnectionError,
    MystbinDecodeError,
    MystbinError,
    MystbinTransportError,
)
from mystbin_client.api.expiry import encode_expiry, parse_timestamp
from mystbin_client.api.models import (
    APIError,
    DeleteResult,
    Expiry,
    File,
    Paste,
    UserPaste,
)


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
    "encode_expiry",
    "parse_timestamp",
]
