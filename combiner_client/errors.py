"""Exceptions raised by the Combiner client.

Every failure that reaches the caller derives from ``CombinerClientError``;
transport and HTTP library errors are translated at the I/O boundary.
"""

from __future__ import annotations

from typing import Any


class CombinerClientError(Exception):
    """Base error for the Combiner client."""


class CombinerTimeout(CombinerClientError):
    """A request or channel handshake exceeded its time limit."""


class CombinerConnectionError(CombinerClientError):
    """The service could not be reached."""


class CombinerHandshakeError(CombinerClientError):
    """The channel endpoint refused the upgrade."""


class CombinerResponseError(CombinerClientError):
    """The REST gateway answered with a non-2xx status.

    ``payload`` holds the decoded JSON error body when the body is JSON,
    otherwise the raw response text.
    """

    def __init__(self, status: int, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


class CombinerBridgeError(CombinerClientError):
    """A request to the native host failed or was superseded."""


class CombinerBridgeUnavailable(CombinerBridgeError):
    """No native host is attached."""
