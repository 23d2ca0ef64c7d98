"""CLI module for mystbin-client."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer

from mystbin_client import __version__
from mystbin_client.api import (
    APIError,
    DeleteResult,
    Expiry,
    GetPasteBuilder,
    MultiPasteBuilder,
    MystbinError,
    PasteBuilder,
    SyncClient,
)
from mystbin_client.config import ConfigurationError, Settings, load_settings
from mystbin_client.observability import LogLevel, configure_logging, get_logger


if TYPE_CHECKING:
    from collections.abc import Iterator

    from mystbin_client.api import UserPaste


app = typer.Typer(
    name="mystbin",
    help="Create, fetch and manage pastes on mystb.in.",
    no_args_is_help=True,
)
bookmark_app = typer.Typer(help="Manage bookmarked pastes.", no_args_is_help=True)
app.add_typer(bookmark_app, name="bookmark")

PASTE_URL = "https://mystb.in"


def version_callback(value: bool) -> None:  # noqa: FBT001
    """Print version and exit."""
    if value:
        typer.echo(f"mystbin version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--verbose",
        "-V",
        help="Enable verbose (debug) logging.",
    ),
    quiet: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--quiet",
        "-q",
        help="Only show errors.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
    ),
) -> None:
    """mystb.in command line client."""
    del version  # Handled by callback

    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive.", err=True)
        raise typer.Exit(1)

    try:
        settings = load_settings(config_file)
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(1) from exc

    if verbose:
        level = LogLevel.DEBUG
    elif quiet:
        level = LogLevel.ERROR
    else:
        level = settings.logging.level

    log_format = settings.logging.format
    configure_logging(level=level, log_format=log_format.value if log_format else None)
    ctx.obj = settings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(1)


def _open_client(ctx: typer.Context) -> SyncClient:
    settings: Settings = ctx.obj
    try:
        return SyncClient.from_settings(settings)
    except MystbinError as exc:
        _fail(f"Error: {exc.message}")


def _check[T](result: T | APIError) -> T:
    """Exit with the API error if the call failed."""
    if isinstance(result, APIError):
        message = f"Error {result.code}"
        if result.message:
            message += f": {result.message}"
        if result.notice:
            message += f" ({result.notice})"
        _fail(message)
    return result


def _user_paste_lines(pastes: list[UserPaste] | None) -> Iterator[str]:
    for paste in pastes or []:
        expires = paste.expires.isoformat() if paste.expires else "never"
        yield f"{paste.id}\tcreated {paste.created_at.isoformat()}\texpires {expires}"


def _print_delete_result(result: DeleteResult) -> None:
    for paste_id in sorted(result.succeeded or ()):
        typer.echo(f"deleted {paste_id}")
    for paste_id in sorted(result.failed or ()):
        typer.echo(f"failed {paste_id}", err=True)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def create(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(  # noqa: B008
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Files to upload.",
    ),
    password: str | None = typer.Option(None, "--password", "-p", help="Password."),
    days: int = typer.Option(0, "--expires-in-days", help="Expire after N days."),
    hours: int = typer.Option(0, "--expires-in-hours", help="Expire after N hours."),
    minutes: int = typer.Option(
        0, "--expires-in-minutes", help="Expire after N minutes."
    ),
) -> None:
    """Create a paste from one or more files."""
    log = get_logger(__name__, command="create")
    expiry = Expiry(days=days, hours=hours, minutes=minutes)

    builder = MultiPasteBuilder()
    for index, path in enumerate(files):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _fail(f"Error: cannot read {path}: {exc}")
        file_builder = PasteBuilder().filename(path.name).content(content)
        if index == 0:
            file_builder.expires(expiry)
            if password is not None:
                file_builder.password(password)
        builder.file(file_builder)

    with _open_client(ctx) as client:
        try:
            paste = _check(client.create_multifile_paste(builder))
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")

    log.info("paste_created", paste_id=paste.id, files=len(paste.files))
    typer.echo(paste.id)
    typer.echo(f"{PASTE_URL}/{paste.id}")


@app.command()
def get(
    ctx: typer.Context,
    paste_id: str = typer.Argument(..., help="Paste ID."),
    password: str | None = typer.Option(None, "--password", "-p", help="Password."),
) -> None:
    """Print the files of a paste."""
    builder = GetPasteBuilder(paste_id)
    if password is not None:
        builder.password(password)

    with _open_client(ctx) as client:
        try:
            paste = _check(client.get_paste(builder))
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")

    for file in paste.files:
        typer.echo(f"==> {file.filename} <==")
        typer.echo(file.content)


@app.command()
def delete(
    ctx: typer.Context,
    paste_ids: list[str] = typer.Argument(  # noqa: B008
        ..., help="Paste IDs to delete."
    ),
) -> None:
    """Delete one or more of your pastes."""
    with _open_client(ctx) as client:
        try:
            if len(paste_ids) == 1:
                result = _check(client.delete_paste(paste_ids[0]))
            else:
                result = _check(client.delete_pastes(paste_ids))
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")

    _print_delete_result(result)
    if result.failed:
        raise typer.Exit(1)


@app.command()
def pastes(
    ctx: typer.Context,
    limit: int = typer.Option(50, "--limit", "-l", help="Pastes per page."),
    page: int = typer.Option(1, "--page", help="Page number."),
) -> None:
    """List your pastes."""
    with _open_client(ctx) as client:
        try:
            result = _check(
                client.get_user_pastes(lambda o: o.limit(limit).page(page))
            )
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")

    for line in _user_paste_lines(result):
        typer.echo(line)


@app.command()
def bookmarks(ctx: typer.Context) -> None:
    """List your bookmarked pastes."""
    with _open_client(ctx) as client:
        try:
            result = _check(client.get_user_bookmarks())
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")

    for line in _user_paste_lines(result):
        typer.echo(line)


@bookmark_app.command("add")
def bookmark_add(
    ctx: typer.Context,
    paste_id: str = typer.Argument(..., help="Paste ID to bookmark."),
) -> None:
    """Bookmark a paste."""
    with _open_client(ctx) as client:
        try:
            _check(client.create_bookmark(paste_id))
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")
    typer.echo(f"bookmarked {paste_id}")


@bookmark_app.command("remove")
def bookmark_remove(
    ctx: typer.Context,
    paste_id: str = typer.Argument(..., help="Paste ID to remove."),
) -> None:
    """Remove a bookmark."""
    with _open_client(ctx) as client:
        try:
            _check(client.delete_bookmark(paste_id))
        except MystbinError as exc:
            _fail(f"Error: {exc.message}")
    typer.echo(f"removed bookmark {paste_id}")


__all__ = ["app"]
