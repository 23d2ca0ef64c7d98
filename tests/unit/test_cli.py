"""Unit tests for the mystbin command line."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx  # noqa: TC002
from typer.testing import CliRunner

from mystbin_client import __version__
from mystbin_client.cli import app
from mystbin_client.config import Settings


BASE_URL = "https://api.mystb.in"

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Run every command in an empty directory with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Settings, "CONFIG_SEARCH_PATHS", [Path("mystbin.yaml")])


@pytest.fixture
def paste_file(tmp_path: Path) -> Path:
    """Create a file to upload."""
    path = tmp_path / "hello.py"
    path.write_text("print('hello')\n")
    return path


class TestMain:
    """Tests for global options."""

    def test_version(self) -> None:
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"mystbin version {__version__}" in result.output

    def test_verbose_and_quiet_conflict(self) -> None:
        """Test that --verbose and --quiet are mutually exclusive."""
        result = runner.invoke(app, ["--verbose", "--quiet", "bookmarks"])

        assert result.exit_code == 1
        assert "mutually exclusive" in result.output

    def test_missing_config_file(self) -> None:
        """Test that an explicit missing config file is reported."""
        result = runner.invoke(app, ["--config", "missing.yaml", "bookmarks"])

        assert result.exit_code == 1
        assert "Configuration file not found: missing.yaml" in result.output


class TestCreate:
    """Tests for the create command."""

    @pytest.mark.respx(base_url=BASE_URL)
    def test_create(
        self,
        respx_mock: respx.MockRouter,
        paste_file: Path,
        created_paste_json: dict[str, Any],
    ) -> None:
        """Test uploading a file prints the ID and URL."""
        route = respx_mock.put("/paste").mock(
            return_value=httpx.Response(201, json=created_paste_json)
        )

        result = runner.invoke(app, ["create", str(paste_file), "-p", "hunter2"])

        assert result.exit_code == 0, result.output
        assert "EquipmentMovingExpensive" in result.output
        assert "https://mystb.in/EquipmentMovingExpensive" in result.output
        body = json.loads(route.calls.last.request.content)
        assert body["files"] == [
            {"filename": "hello.py", "content": "print('hello')\n"}
        ]
        assert body["password"] == "hunter2"
        assert body["expires"] is None

    @pytest.mark.respx(base_url=BASE_URL)
    def test_create_with_expiry(
        self,
        respx_mock: respx.MockRouter,
        paste_file: Path,
        tmp_path: Path,
        created_paste_json: dict[str, Any],
    ) -> None:
        """Test that expiry options produce an expires timestamp."""
        second = tmp_path / "second.txt"
        second.write_text("two")
        route = respx_mock.put("/paste").mock(
            return_value=httpx.Response(201, json=created_paste_json)
        )

        result = runner.invoke(
            app,
            ["create", str(paste_file), str(second), "--expires-in-hours", "2"],
        )

        assert result.exit_code == 0, result.output
        body = json.loads(route.calls.last.request.content)
        assert len(body["files"]) == 2
        assert body["expires"].endswith("+00:00")

    def test_create_negative_expiry(self, paste_file: Path) -> None:
        """Test that a negative expiry is rejected before sending."""
        result = runner.invoke(
            app,
            ["create", str(paste_file), "--expires-in-days", "-1"],
        )

        assert result.exit_code == 1
        assert "days can not be negative, value: -1" in result.output

    def test_create_expiry_out_of_range(self, paste_file: Path) -> None:
        """Test that an expiry past year 9999 is a clean error."""
        result = runner.invoke(
            app,
            ["create", str(paste_file), "--expires-in-days", "10000000"],
        )

        assert result.exit_code == 1
        assert "offset is out of range" in result.output

    def test_create_unreadable_file(self, tmp_path: Path) -> None:
        """Test that a file that is not UTF-8 text is reported, not a traceback."""
        binary = tmp_path / "image.bin"
        binary.write_bytes(b"\xff\xfe bad")

        result = runner.invoke(app, ["create", str(binary)])

        assert result.exit_code == 1
        assert f"Error: cannot read {binary}" in result.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_create_api_error(
        self,
        respx_mock: respx.MockRouter,
        paste_file: Path,
    ) -> None:
        """Test that API errors are printed with their notice."""
        respx_mock.put("/paste").mock(
            return_value=httpx.Response(
                400, json={"error": "Bad request", "notice": "Too large"}
            )
        )

        result = runner.invoke(app, ["create", str(paste_file)])

        assert result.exit_code == 1
        assert "Error 400: Bad request (Too large)" in result.output


class TestGet:
    """Tests for the get command."""

    @pytest.mark.respx(base_url=BASE_URL)
    def test_get(
        self,
        respx_mock: respx.MockRouter,
        fetched_paste_json: dict[str, Any],
    ) -> None:
        """Test that every file is printed with a header."""
        route = respx_mock.get("/paste/EquipmentMovingExpensive").mock(
            return_value=httpx.Response(200, json=fetched_paste_json)
        )

        result = runner.invoke(
            app, ["get", "EquipmentMovingExpensive", "--password", "pw"]
        )

        assert result.exit_code == 0, result.output
        assert "==> first.py <==" in result.output
        assert "print(2)" in result.output
        assert route.calls.last.request.url.params["password"] == "pw"

    @pytest.mark.respx(base_url=BASE_URL)
    def test_get_not_found(self, respx_mock: respx.MockRouter) -> None:
        """Test that a missing paste exits with an error."""
        respx_mock.get("/paste/missing").mock(return_value=httpx.Response(404))

        result = runner.invoke(app, ["get", "missing"])

        assert result.exit_code == 1
        assert "Error 404" in result.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_get_connection_error(self, respx_mock: respx.MockRouter) -> None:
        """Test that network failures exit with an error."""
        respx_mock.get("/paste/abc").mock(side_effect=httpx.ConnectError("down"))

        result = runner.invoke(app, ["get", "abc"])

        assert result.exit_code == 1
        assert "Error: Failed to connect to mystb.in" in result.output


class TestDelete:
    """Tests for the delete command."""

    @pytest.mark.respx(base_url=BASE_URL)
    def test_delete_one(self, respx_mock: respx.MockRouter) -> None:
        """Test deleting a single paste."""
        respx_mock.delete("/paste/abc").mock(return_value=httpx.Response(200))

        result = runner.invoke(app, ["delete", "abc"])

        assert result.exit_code == 0, result.output
        assert "deleted abc" in result.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_delete_many_partial_failure(self, respx_mock: respx.MockRouter) -> None:
        """Test that failed deletions are reported and set the exit code."""
        respx_mock.delete("/paste").mock(
            return_value=httpx.Response(200, json={"succeeded": ["a"], "failed": ["b"]})
        )

        result = runner.invoke(app, ["delete", "a", "b"])

        assert result.exit_code == 1
        assert "deleted a" in result.output
        assert "failed b" in result.output


class TestUserCommands:
    """Tests for commands that need a token."""

    def test_pastes_without_token(self) -> None:
        """Test that listing pastes without a token fails cleanly."""
        result = runner.invoke(app, ["pastes"])

        assert result.exit_code == 1
        assert "requires an authenticated client" in result.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_invalid_token(
        self,
        respx_mock: respx.MockRouter,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a rejected token is reported before the command runs."""
        monkeypatch.setenv("MYSTBIN_TOKEN", "bad-token")
        respx_mock.get("/users/@me").mock(return_value=httpx.Response(401))

        result = runner.invoke(app, ["bookmarks"])

        assert result.exit_code == 1
        assert "The provided token is invalid (status=401)" in result.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_pastes(
        self,
        respx_mock: respx.MockRouter,
        monkeypatch: pytest.MonkeyPatch,
        user_pastes_json: dict[str, Any],
    ) -> None:
        """Test listing pastes with pagination."""
        monkeypatch.setenv("MYSTBIN_TOKEN", "good-token")
        respx_mock.get("/users/@me").mock(return_value=httpx.Response(200, json={}))
        route = respx_mock.get("/pastes/@me").mock(
            return_value=httpx.Response(200, json=user_pastes_json)
        )

        result = runner.invoke(app, ["pastes", "--limit", "2", "--page", "3"])

        assert result.exit_code == 0, result.output
        assert "RotationSchedulesProperly" in result.output
        assert "expires never" in result.output
        params = route.calls.last.request.url.params
        assert (params["limit"], params["page"]) == ("2", "3")
        auth = route.calls.last.request.headers["Authorization"]
        assert auth == "Bearer good-token"

    @pytest.mark.respx(base_url=BASE_URL)
    def test_bookmark_add_and_remove(
        self,
        respx_mock: respx.MockRouter,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the bookmark subcommands."""
        monkeypatch.setenv("MYSTBIN_TOKEN", "good-token")
        respx_mock.get("/users/@me").mock(return_value=httpx.Response(200, json={}))
        respx_mock.put("/users/bookmarks").mock(return_value=httpx.Response(201))
        respx_mock.delete("/users/bookmarks").mock(return_value=httpx.Response(204))

        added = runner.invoke(app, ["bookmark", "add", "abc"])
        removed = runner.invoke(app, ["bookmark", "remove", "abc"])

        assert added.exit_code == 0, added.output
        assert "bookmarked abc" in added.output
        assert removed.exit_code == 0, removed.output
        assert "removed bookmark abc" in removed.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_token_from_config_file(
        self,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test that the token and base URL come from the config file."""
        config = tmp_path / "custom.yaml"
        config.write_text(f'api:\n  base_url: "{BASE_URL}"\n  token: "file-token"\n')
        probe = respx_mock.get("/users/@me").mock(
            return_value=httpx.Response(200, json={})
        )
        respx_mock.get("/users/bookmarks").mock(
            return_value=httpx.Response(200, json={"bookmarks": []})
        )

        result = runner.invoke(app, ["-c", str(config), "bookmarks"])

        assert result.exit_code == 0, result.output
        assert probe.calls.last.request.headers["Authorization"] == "Bearer file-token"
