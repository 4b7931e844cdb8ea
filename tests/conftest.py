"""Pytest configuration and fixtures for combiner_client tests."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from websockets.exceptions import ConnectionClosedError
from websockets.protocol import State


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    json_data: Any = None,
    text_data: str | None = None,
    content_type: str = "application/json",
    reason: str = "OK",
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Data to return from json() call
        text_data: Data to return from text() call
        content_type: Value of the Content-Type header
        reason: HTTP reason phrase

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status
    response.reason = reason
    response.headers = {"Content-Type": content_type}

    if json_data is not None:
        response.json.return_value = json_data
    if text_data is not None:
        response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


async def settle(rounds: int = 10) -> None:
    """Let pending callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class _End:
    def __init__(self, error: Exception | None) -> None:
        self.error = error


class FakeConnection:
    """Scriptable stand-in for a websockets ClientConnection."""

    def __init__(self) -> None:
        self.sent: list[Any] = []
        self.close_calls: list[tuple[int, str]] = []
        self.state = State.OPEN
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.close_gate: asyncio.Event | None = None
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    async def send(self, data: Any) -> None:
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.close_calls.append((code, reason))
        if self.close_gate is not None:
            # Closing handshake held open until the test releases it
            await self.close_gate.wait()
        self._finish(code, reason)

    def feed(self, frame: Any) -> None:
        """Deliver an inbound frame."""
        self._inbox.put_nowait(frame)

    def server_close(self, code: int = 1000, reason: str = "") -> None:
        """Close cleanly from the remote side."""
        self._finish(code, reason)

    def drop(self, code: int = 1006) -> None:
        """Lose the connection without a closing handshake."""
        self._finish(code, "", ConnectionClosedError(None, None))

    def _finish(self, code: int, reason: str, error: Exception | None = None) -> None:
        if self.state is State.CLOSED:
            return
        self.state = State.CLOSED
        self.close_code = code
        self.close_reason = reason
        self._inbox.put_nowait(_End(error))

    def __aiter__(self) -> FakeConnection:
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if isinstance(item, _End):
            if item.error is not None:
                raise item.error
            raise StopAsyncIteration
        return item
