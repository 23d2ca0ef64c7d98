"""Endpoint operations and response reconciliation.

Each API action is described by an :class:`Operation`: the HTTP method,
path, body, query parameters, the set of status codes that mean success,
and a function that extracts the success value from the JSON body. The
blocking and non-blocking facades both send the operation through their
transport and pass the response to :meth:`Operation.reconcile`, so the two
execution styles share one implementation of the status and body handling.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from mystbin_client.api.exceptions import MystbinDecodeError
from mystbin_client.api.expiry import parse_timestamp
from mystbin_client.api.models import (
    APIError,
    BookmarksBody,
    CreatedPasteBody,
    DeleteReportBody,
    DeleteResult,
    ErrorBody,
    FetchedPasteBody,
    File,
    Paste,
    UserPaste,
    UserPastesBody,
)


if TYPE_CHECKING:
    from mystbin_client.api.builders import (
        CreatePasteRequest,
        GetPasteRequest,
        PaginationRequest,
    )
    from mystbin_client.api.models import PartialFile
    from mystbin_client.api.transport import RawResponse


__all__ = [
    "BOOKMARK_PATH",
    "PASTE_PATH",
    "SELF_PATH",
    "USER_PASTES_PATH",
    "Operation",
    "create_bookmark",
    "create_paste",
    "delete_bookmark",
    "delete_paste",
    "delete_pastes",
    "error_from_response",
    "get_paste",
    "get_user_bookmarks",
    "get_user_pastes",
    "validate_token",
]


BOOKMARK_PATH = "/users/bookmarks"
PASTE_PATH = "/paste"
SELF_PATH = "/users/@me"
USER_PASTES_PATH = "/pastes/@me"

_CREATED = frozenset({200, 201, 204})
_OK = frozenset({200})


@dataclass(frozen=True, slots=True)
class Operation[T]:
    """A single API call and the rules for interpreting its response.

    Attributes:
        name: Operation name, used in errors and logs.
        method: HTTP method.
        path: Endpoint path relative to the base URL.
        success_codes: Status codes that produce a success value.
        extract: Builds the success value from the decoded JSON body
            (None when the response had no JSON body).
        json: JSON request body, or None to send none.
        params: Query parameters.
        requires_auth: Whether the call needs a bearer token.
    """

    name: str
    method: str
    path: str
    success_codes: frozenset[int]
    extract: Callable[[Any], T]
    json: Any | None = None
    params: Mapping[str, Any] = field(default_factory=dict)
    requires_auth: bool = False

    def reconcile(self, response: RawResponse) -> T | APIError:
        """Map a response to the success value or an :class:`APIError`.

        Raises:
            MystbinDecodeError: If a success response does not have the
                documented shape.
        """
        if response.status_code in self.success_codes:
            return self.extract(response.json_body)
        return error_from_response(response)


# ---------------------------------------------------------------------------
# Body helpers
# ---------------------------------------------------------------------------


def error_from_response(response: RawResponse) -> APIError:
    """Build the typed error for a non-success response.

    ``error``, ``notice`` and ``detail`` are each copied only when present
    with the expected type; a body that is missing or not a JSON object
    yields an error carrying just the status code.
    """
    body = response.json_body
    if not isinstance(body, dict):
        return APIError(code=response.status_code)
    return ErrorBody.model_validate(body).to_error(response.status_code)


def _decode[M: BaseModel](model: type[M], body: object, operation: str) -> M:
    """Validate a success body, reporting any mismatch as a decode error."""
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        msg = f"{operation}: unexpected response body: {exc}"
        raise MystbinDecodeError(msg) from exc


def _merge_files(
    server_files: Sequence[PartialFile] | None,
    local: Sequence[File],
) -> tuple[File, ...]:
    """Combine the echoed ``files`` array with the files that were sent.

    Server order is kept. Files the server lists without a filename or
    content get them from the local file at the same position.
    """
    if server_files is None:
        return tuple(local)

    files: list[File] = []
    for index, item in enumerate(server_files):
        fallback = local[index] if index < len(local) else None
        filename, content = item.filename, item.content
        if fallback is not None:
            filename = fallback.filename if filename is None else filename
            content = fallback.content if content is None else content
        if filename is None or content is None:
            msg = f"create_paste: file {index} has no filename or content"
            raise MystbinDecodeError(msg)
        files.append(File(filename=filename, content=content))
    return tuple(files)


# ---------------------------------------------------------------------------
# Success extractors
# ---------------------------------------------------------------------------


def _created_paste(body: object, request: CreatePasteRequest) -> Paste:
    data = _decode(CreatedPasteBody, body, "create_paste")
    # A missing key falls back to what was sent; an explicit null means none
    if "expires" in data.model_fields_set:
        expires = data.expires
    elif request.expires is not None:
        expires = parse_timestamp(request.expires)
    else:
        expires = None
    return Paste(
        id=data.id,
        created_at=data.created_at,
        expires=expires,
        files=_merge_files(data.files, request.files),
    )


def _fetched_paste(body: object, request: GetPasteRequest) -> Paste:
    data = _decode(FetchedPasteBody, body, "get_paste")
    return Paste(
        id=request.id if data.id is None else data.id,
        created_at=data.created_at,
        expires=data.expires,
        files=tuple(data.files),
    )


def _deleted_one(body: object, paste_id: str) -> DeleteResult:
    del body  # Success needs no body
    return DeleteResult(succeeded=frozenset({paste_id}))


def _deleted_many(body: object) -> DeleteResult:
    return _decode(DeleteReportBody, body, "delete_pastes").to_result()


def _user_pastes(body: object) -> list[UserPaste] | None:
    return _decode(UserPastesBody, body, "get_user_pastes").pastes


def _bookmarks(body: object) -> list[UserPaste] | None:
    return _decode(BookmarksBody, body, "get_user_bookmarks").bookmarks


def _no_content(body: object) -> None:
    del body


def _passthrough(body: object) -> Any:  # noqa: ANN401
    return body


# ---------------------------------------------------------------------------
# Operation factories
# ---------------------------------------------------------------------------


def create_paste(request: CreatePasteRequest) -> Operation[Paste]:
    """``PUT /paste`` for a single- or multi-file paste."""
    return Operation(
        name="create_paste",
        method="PUT",
        path=PASTE_PATH,
        success_codes=_CREATED,
        extract=partial(_created_paste, request=request),
        json=request.to_json(),
    )


def get_paste(request: GetPasteRequest) -> Operation[Paste]:
    """``GET /paste/{id}`` with an optional ``password`` query parameter."""
    return Operation(
        name="get_paste",
        method="GET",
        path=f"{PASTE_PATH}/{quote(request.id, safe='')}",
        success_codes=_OK,
        extract=partial(_fetched_paste, request=request),
        params=request.to_params(),
    )


def delete_paste(paste_id: str) -> Operation[DeleteResult]:
    """``DELETE /paste/{id}``."""
    return Operation(
        name="delete_paste",
        method="DELETE",
        path=f"{PASTE_PATH}/{quote(paste_id, safe='')}",
        success_codes=_OK,
        extract=partial(_deleted_one, paste_id=paste_id),
    )


def delete_pastes(paste_ids: Sequence[str]) -> Operation[DeleteResult]:
    """``DELETE /paste`` with a ``pastes`` array body."""
    return Operation(
        name="delete_pastes",
        method="DELETE",
        path=PASTE_PATH,
        success_codes=_OK,
        extract=_deleted_many,
        json={"pastes": list(paste_ids)},
    )


def get_user_pastes(
    pagination: PaginationRequest,
) -> Operation[list[UserPaste] | None]:
    """``GET /pastes/@me`` with ``limit`` and ``page`` query parameters."""
    return Operation(
        name="get_user_pastes",
        method="GET",
        path=USER_PASTES_PATH,
        success_codes=_OK,
        extract=_user_pastes,
        params=pagination.to_params(),
        requires_auth=True,
    )


def create_bookmark(paste_id: str) -> Operation[None]:
    """``PUT /users/bookmarks``."""
    return Operation(
        name="create_bookmark",
        method="PUT",
        path=BOOKMARK_PATH,
        success_codes=frozenset({201}),
        extract=_no_content,
        json={"paste_id": paste_id},
        requires_auth=True,
    )


def delete_bookmark(paste_id: str) -> Operation[None]:
    """``DELETE /users/bookmarks``."""
    return Operation(
        name="delete_bookmark",
        method="DELETE",
        path=BOOKMARK_PATH,
        success_codes=frozenset({204}),
        extract=_no_content,
        json={"paste_id": paste_id},
        requires_auth=True,
    )


def get_user_bookmarks() -> Operation[list[UserPaste] | None]:
    """``GET /users/bookmarks``."""
    return Operation(
        name="get_user_bookmarks",
        method="GET",
        path=BOOKMARK_PATH,
        success_codes=_OK,
        extract=_bookmarks,
        requires_auth=True,
    )


def validate_token() -> Operation[Any]:
    """``GET /users/@me``, the token validation probe."""
    return Operation(
        name="validate_token",
        method="GET",
        path=SELF_PATH,
        success_codes=_OK,
        extract=_passthrough,
        requires_auth=True,
    )
