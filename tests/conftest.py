"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest
import structlog


if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def api_token() -> str:
    """API token for authenticated test clients."""
    return "test-token-12345"


@pytest.fixture(autouse=True)
def _no_ambient_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's MYSTBIN_* environment out of the tests."""
    monkeypatch.delenv("MYSTBIN_TOKEN", raising=False)
    monkeypatch.delenv("MYSTBIN_API__TOKEN", raising=False)
    monkeypatch.delenv("MYSTBIN_API__BASE_URL", raising=False)


@pytest.fixture
def created_paste_json() -> dict[str, Any]:
    """Body returned by PUT /paste."""
    return {
        "id": "EquipmentMovingExpensive",
        "created_at": "2024-01-01T00:00:00+00:00",
        "expires": None,
    }


@pytest.fixture
def fetched_paste_json() -> dict[str, Any]:
    """Body returned by GET /paste/{id}."""
    return {
        "id": "EquipmentMovingExpensive",
        "created_at": "2024-01-01T00:00:00+00:00",
        "expires": "2024-01-02T00:00:00+00:00",
        "files": [
            {"filename": "first.py", "content": "print(1)", "loc": 1},
            {"filename": "second.py", "content": "print(2)", "loc": 1},
        ],
    }


@pytest.fixture
def user_pastes_json() -> dict[str, Any]:
    """Body returned by GET /pastes/@me."""
    return {
        "pastes": [
            {
                "id": "RotationSchedulesProperly",
                "created_at": "2024-01-01T10:30:00Z",
                "expires": None,
            },
            {
                "id": "SpecificsBillionComponent",
                "created_at": "2024-01-02T10:30:00+00:00",
                "expires": "2024-02-02T10:30:00+00:00",
            },
        ]
    }


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop logging configuration that points at a closed capture stream."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)
