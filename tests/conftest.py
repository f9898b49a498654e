"""Shared pytest fixtures for fastapi-incoming-request tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.types import Message


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with an optional body."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
        query_string: str = "",
        body: bytes = b"",
        client: tuple[str, int] | None = ("127.0.0.1", 50000),
    ) -> Request:
        if isinstance(headers, dict):
            header_items = list(headers.items())
        else:
            header_items = list(headers or [])
        scope: dict[str, Any] = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "query_string": query_string.encode(),
            "headers": [(k.lower().encode(), v.encode()) for k, v in header_items],
            "root_path": "",
            "server": ("testserver", 80),
            "client": client,
        }

        async def receive() -> Message:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def mock_decode() -> AsyncMock:
    """Mock async token decode callback that returns a sample user dict."""
    mock = AsyncMock()
    mock.return_value = {"sub": "user-123", "email": "test@example.com"}
    return mock


@pytest.fixture
def mock_lookup() -> AsyncMock:
    """Mock async session lookup callback."""
    mock = AsyncMock()
    mock.return_value = {"id": "user-456", "name": "Cookie User"}
    return mock
