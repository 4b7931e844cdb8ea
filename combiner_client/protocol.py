"""Protocol helpers for Combiner Service channel frames."""

from __future__ import annotations

import json
import logging
from typing import Any, Final
from urllib.parse import urlencode, urlsplit, urlunsplit

_LOGGER = logging.getLogger(__name__)

CONNECTION_ESTABLISHED: Final = "connection_established"

_WS_SCHEMES: Final = {"https": "wss", "wss": "wss"}

Frame = str | bytes | bytearray | memoryview


def build_ws_url(base_url: str, path: str, module_id: str, panel: str | None) -> str:
    """Build the channel endpoint from an HTTP(S) base address.

    ``https`` maps to ``wss``; anything else maps to ``ws``. The mount path
    replaces any path on the base address.
    """
    parts = urlsplit(base_url)
    scheme = _WS_SCHEMES.get(parts.scheme, "ws")
    query = {"moduleId": module_id}
    if panel:
        query["panel"] = panel
    return urlunsplit((scheme, parts.netloc, path, urlencode(query), ""))


def encode_payload(payload: Any) -> Frame:
    """Prepare an outbound payload for transmission.

    Text and binary frames pass through untouched; everything else is
    serialized to JSON, falling back to ``str()``.
    """
    if isinstance(payload, (str, bytes, bytearray, memoryview)):
        return payload
    try:
        return json.dumps(payload)
    except (TypeError, ValueError):
        _LOGGER.warning("Falling back to str() for payload of type %s", type(payload))
        return str(payload)


def decode_payload(data: Any) -> Any:
    """Parse an inbound frame as JSON.

    Raises:
        ValueError: If the frame is not valid JSON text
    """
    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    if not isinstance(data, (str, bytes)):
        raise ValueError(f"Cannot decode frame of type {type(data).__name__}")
    return json.loads(data)


def is_connection_established(value: Any) -> bool:
    """Return True if a decoded frame carries the connection marker."""
    return isinstance(value, dict) and value.get("type") == CONNECTION_ESTABLISHED
