"""Client SDK for the Combiner Service."""

__version__ = "0.1.0"

from .bridge import BrowserBackend
from .context import ContextManagerClient, filter_contexts
from .errors import (
    CombinerBridgeError,
    CombinerBridgeUnavailable,
    CombinerClientError,
    CombinerConnectionError,
    CombinerHandshakeError,
    CombinerResponseError,
    CombinerTimeout,
)
from .events import ClientEvent, EventEmitter
from .http import CombinerHttpClient, CombinerRestClient
from .mocks import MOCK_CONTEXTS
from .models import ApiResponse, Context, SearchContextsBody
from .protocol import build_ws_url, decode_payload, encode_payload
from .ws import connect_websocket
from .ws_client import CloseInfo, CombinerWsClient, ConnectionState

__all__ = [
    "MOCK_CONTEXTS",
    "ApiResponse",
    "BrowserBackend",
    "ClientEvent",
    "CloseInfo",
    "CombinerBridgeError",
    "CombinerBridgeUnavailable",
    "CombinerClientError",
    "CombinerConnectionError",
    "CombinerHandshakeError",
    "CombinerHttpClient",
    "CombinerResponseError",
    "CombinerRestClient",
    "CombinerTimeout",
    "CombinerWsClient",
    "ConnectionState",
    "Context",
    "ContextManagerClient",
    "EventEmitter",
    "SearchContextsBody",
    "__version__",
    "build_ws_url",
    "connect_websocket",
    "decode_payload",
    "encode_payload",
    "filter_contexts",
]
