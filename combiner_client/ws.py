"""Transport opener for the Combiner Service channel endpoint."""

from __future__ import annotations

import asyncio

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)

from .const import DEFAULT_CONNECT_TIMEOUT, DEFAULT_PING_INTERVAL
from .errors import (
    CombinerConnectionError,
    CombinerHandshakeError,
    CombinerTimeout,
)


async def connect_websocket(
    url: str,
    *,
    ping_interval: int | None = DEFAULT_PING_INTERVAL,
    timeout: float = DEFAULT_CONNECT_TIMEOUT,
) -> ClientConnection:
    """Open the channel transport for one module.

    ``url`` is the full endpoint as built by ``build_ws_url``, module id and
    panel already in the query. Frame size is unbounded because the service
    relays whole documents over the channel.

    Args:
        url: Channel endpoint (ws:// or wss://)
        ping_interval: Keepalive ping interval in seconds, None to disable
        timeout: Seconds allowed for the opening handshake

    Raises:
        CombinerTimeout: The service did not complete the handshake in time
        CombinerHandshakeError: The service refused the upgrade or the URL is invalid
        CombinerConnectionError: The service could not be reached
    """
    try:
        return await asyncio.wait_for(
            connect(
                url,
                ping_interval=ping_interval,
                close_timeout=5,
                max_size=None,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise CombinerTimeout(
            f"Channel handshake with {url} timed out after {timeout}s"
        ) from err
    except (InvalidHandshake, InvalidURI) as err:
        raise CombinerHandshakeError(f"Channel upgrade refused by {url}: {err}") from err
    except (OSError, WebSocketException) as err:
        raise CombinerConnectionError(f"Channel endpoint {url} unreachable: {err}") from err
