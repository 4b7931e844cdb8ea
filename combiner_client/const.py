"""Defaults shared by the Combiner Service clients."""

from __future__ import annotations

from typing import Final

DEFAULT_BASE_URL: Final = "http://localhost:22003"
DEFAULT_WS_PATH: Final = "/ws"
DEFAULT_PANEL: Final = "unknown"

# Seconds
DEFAULT_RECONNECT_BACKOFF: Final = 1.0
DEFAULT_MAX_RECONNECT_BACKOFF: Final = 30.0
DEFAULT_CONNECT_TIMEOUT: Final = 15.0
DEFAULT_PING_INTERVAL: Final = 20
DEFAULT_REQUEST_TIMEOUT: Final = 10.0
MOCK_DELAY: Final = 0.3

NORMAL_CLOSURE: Final = 1000
INTERNAL_ERROR: Final = 1011

BRIDGE_NAMESPACE: Final = "aiwize_applications"
