"""Persistent channel client for the Combiner Service WebSocket bus.

The client owns one logical connection and hides transport churn from the
caller:

- outbound frames are queued while the channel is not open and written in
  FIFO order once it is;
- involuntary closes trigger reconnection with capped exponential back-off;
- connection and message lifecycle is reported through ``ClientEvent``
  notifications.

Usage:
    client = CombinerWsClient("notes", panel="left")
    client.on("json", handle_json)
    client.send({"type": "hello"})  # queued until open
    await client.connect()
    ...
    await client.disconnect()
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any

from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed, ConnectionClosedError
from websockets.protocol import State

from .const import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_RECONNECT_BACKOFF,
    DEFAULT_PANEL,
    DEFAULT_PING_INTERVAL,
    DEFAULT_RECONNECT_BACKOFF,
    DEFAULT_WS_PATH,
    INTERNAL_ERROR,
    NORMAL_CLOSURE,
)
from .errors import CombinerClientError
from .events import ClientEvent, EventEmitter
from .protocol import (
    Frame,
    build_ws_url,
    decode_payload,
    encode_payload,
    is_connection_established,
)
from .ws import connect_websocket

_LOGGER = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle of the logical connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


@dataclass(frozen=True)
class CloseInfo:
    """Payload of the ``close`` notification."""

    code: int | None = None
    reason: str = ""


class CombinerWsClient(EventEmitter):
    """Auto-reconnecting WebSocket client for the Combiner Service."""

    def __init__(
        self,
        module_id: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        path: str = DEFAULT_WS_PATH,
        panel: str | None = DEFAULT_PANEL,
        auto_reconnect: bool = True,
        max_reconnect_attempts: int | None = None,
        reconnect_backoff: float = DEFAULT_RECONNECT_BACKOFF,
        max_reconnect_backoff: float = DEFAULT_MAX_RECONNECT_BACKOFF,
        ping_interval: int | None = DEFAULT_PING_INTERVAL,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            module_id: Identifier of the calling module (required)
            base_url: HTTP(S) address of the Combiner Service
            path: Mount path of the WebSocket endpoint
            panel: Optional panel label sent with the module id
            auto_reconnect: Reconnect after involuntary closes
            max_reconnect_attempts: Attempt ceiling, None for unbounded
            reconnect_backoff: First reconnect delay (seconds)
            max_reconnect_backoff: Upper bound for the reconnect delay (seconds)
            ping_interval: Keepalive ping interval (seconds), None to disable
            connect_timeout: Opening handshake timeout (seconds)
        """
        super().__init__()
        if not module_id:
            raise ValueError("module_id is required")

        self.module_id = module_id
        self.base_url = base_url
        self.path = path
        self.panel = panel

        self._auto_reconnect = auto_reconnect
        self._max_reconnect_attempts = max_reconnect_attempts
        self._reconnect_backoff = reconnect_backoff
        self._max_reconnect_backoff = max_reconnect_backoff
        self._ping_interval = ping_interval
        self._connect_timeout = connect_timeout

        # Connection state
        self._ws: ClientConnection | None = None
        self._state = ConnectionState.DISCONNECTED
        self._reconnect_attempts = 0
        self._manual_close = False
        self._listen_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None

        # Outbound frames not yet written, oldest first
        self._queue: deque[Frame] = deque()
        self._queue_ready = asyncio.Event()
        self._writer_task: asyncio.Task[None] | None = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def url(self) -> str:
        """Resolved channel endpoint."""
        return build_ws_url(self.base_url, self.path, self.module_id, self.panel)

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if the channel is open."""
        return self._state is ConnectionState.OPEN

    @property
    def ready_state(self) -> State | None:
        """Raw state of the live transport, or None without one."""
        if self._ws is None:
            return None
        return self._ws.state

    @property
    def reconnect_attempts(self) -> int:
        """Reconnect attempts since the last successful open."""
        return self._reconnect_attempts

    @property
    def pending_count(self) -> int:
        """Number of outbound frames not yet written to the transport."""
        return len(self._queue)

    async def connect(self) -> None:
        """Open the channel. Returns once the transport is open.

        Does nothing if the channel is already connecting or open.

        Raises:
            CombinerClientError: If the transport could not be opened
        """
        if self._state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
            return

        if self._ws is not None:
            # Still closing: the old listener must only report its close
            _LOGGER.debug("[%s] Detaching closing transport", self.module_id)
            self._stop_writer()
            self._ws = None
            self._listen_task = None

        self._manual_close = False
        self._set_state(ConnectionState.CONNECTING)
        url = self.url

        _LOGGER.info(
            "[%s] Connecting to %s (attempt #%d)",
            self.module_id,
            url,
            self._reconnect_attempts + 1,
        )

        try:
            ws = await connect_websocket(
                url,
                ping_interval=self._ping_interval,
                timeout=self._connect_timeout,
            )
        except asyncio.CancelledError:
            self._set_state(ConnectionState.DISCONNECTED)
            raise
        except CombinerClientError as err:
            _LOGGER.warning("[%s] Connection failed: %s", self.module_id, err)
            self.emit(ClientEvent.ERROR, err)
            self._handle_close(CloseInfo())
            raise

        self._ws = ws
        self._reconnect_attempts = 0
        self._set_state(ConnectionState.OPEN)

        # Frames queued while offline go out before anyone hears about the open
        await self._drain(ws)
        self._listen_task = asyncio.create_task(self._listen(ws))
        if self._ws is not ws or self._state is not ConnectionState.OPEN:
            return
        self._start_writer(ws)

        _LOGGER.info("[%s] Connected", self.module_id)
        self.emit(ClientEvent.OPEN)

    def send(self, payload: Any) -> None:
        """Send a payload, queueing it until the channel is open.

        Strings and binary frames are sent as-is, anything else as JSON.
        Never raises for a closed channel.
        """
        self._queue.append(encode_payload(payload))
        if self._state is ConnectionState.OPEN:
            self._queue_ready.set()
        else:
            _LOGGER.debug(
                "[%s] Channel not open, %d frame(s) queued",
                self.module_id,
                len(self._queue),
            )

    async def disconnect(self, code: int = NORMAL_CLOSURE, reason: str = "") -> None:
        """Close the channel and suppress reconnection.

        Reconnection stays off until ``connect()`` is called again.
        """
        self._manual_close = True
        self._cancel_reconnect()

        if self._ws is None or self._state is not ConnectionState.OPEN:
            return

        _LOGGER.info("[%s] Closing channel (%d)", self.module_id, code)
        self._set_state(ConnectionState.CLOSING)
        await self._ws.close(code, reason)

    # -------------------------------------------------------------------------
    # Internal: Connection State Machine
    # -------------------------------------------------------------------------

    def _set_state(self, state: ConnectionState) -> None:
        if self._state is not state:
            _LOGGER.debug(
                "[%s] State: %s → %s", self.module_id, self._state.value, state.value
            )
            self._state = state

    def _handle_close(self, info: CloseInfo) -> None:
        """Tear down the live transport and reconnect if the close was involuntary."""
        self._ws = None
        self._listen_task = None
        self._stop_writer()
        self._set_state(ConnectionState.DISCONNECTED)
        self.emit(ClientEvent.CLOSE, info)

        if self._manual_close or not self._auto_reconnect:
            _LOGGER.debug("[%s] Reconnect not requested", self.module_id)
            return
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        """Schedule reconnection with capped exponential backoff."""
        limit = self._max_reconnect_attempts
        if limit is not None and self._reconnect_attempts >= limit:
            _LOGGER.debug(
                "[%s] Reconnect limit reached (%d)", self.module_id, limit
            )
            return

        self._reconnect_attempts += 1
        delay = min(
            self._reconnect_backoff * 2 ** (self._reconnect_attempts - 1),
            self._max_reconnect_backoff,
        )

        _LOGGER.info(
            "[%s] Reconnecting in %.1fs (attempt %d)",
            self.module_id,
            delay,
            self._reconnect_attempts,
        )
        self.emit(ClientEvent.RECONNECTING, self._reconnect_attempts, delay)

        self._cancel_reconnect()
        self._reconnect_task = asyncio.create_task(self._reconnect_after_delay(delay))

    async def _reconnect_after_delay(self, delay: float) -> None:
        """Reconnect after delay."""
        try:
            await asyncio.sleep(delay)
            if self._manual_close:
                _LOGGER.debug("[%s] Reconnect suppressed", self.module_id)
                return
            await self.connect()
        except asyncio.CancelledError:
            _LOGGER.debug("[%s] Reconnect cancelled", self.module_id)
        except CombinerClientError as err:
            # The failed attempt already scheduled the next one
            _LOGGER.debug("[%s] Reconnect failed: %s", self.module_id, err)
        finally:
            if self._reconnect_task is asyncio.current_task():
                self._reconnect_task = None

    def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    # -------------------------------------------------------------------------
    # Internal: Outbound Queue
    # -------------------------------------------------------------------------

    def _start_writer(self, ws: ClientConnection) -> None:
        self._stop_writer()
        self._queue_ready.set()
        self._writer_task = asyncio.create_task(self._write_loop(ws))

    def _stop_writer(self) -> None:
        if self._writer_task is not None:
            self._writer_task.cancel()
            self._writer_task = None
        self._queue_ready.clear()

    async def _write_loop(self, ws: ClientConnection) -> None:
        """Drain the outbound queue whenever new frames arrive."""
        while True:
            await self._queue_ready.wait()
            self._queue_ready.clear()
            if not await self._drain(ws):
                return

    async def _drain(self, ws: ClientConnection) -> bool:
        """Write queued frames in order while ``ws`` is the live transport.

        Returns False once the transport can no longer be written to.
        """
        while self._queue and self._ws is ws:
            frame = self._queue[0]
            try:
                await ws.send(frame)
            except ConnectionClosed:
                # Frame stays queued for the next open
                return False
            except (TypeError, ValueError) as err:
                _LOGGER.error(
                    "[%s] Dropping unsendable frame: %s", self.module_id, err
                )
            except Exception:
                # Frame stays queued; the listener sees the close and reconnects
                _LOGGER.exception("[%s] Write failed, closing transport", self.module_id)
                await ws.close(INTERNAL_ERROR, "write failed")
                return False
            self._queue.popleft()
        return True

    # -------------------------------------------------------------------------
    # Internal: Message Listener
    # -------------------------------------------------------------------------

    async def _listen(self, ws: ClientConnection) -> None:
        """Dispatch inbound frames until the transport closes."""
        message_count = 0
        try:
            async for raw in ws:
                message_count += 1
                self._handle_frame(raw)
        except ConnectionClosedError as err:
            _LOGGER.warning("[%s] Connection lost: %s", self.module_id, err)
            self.emit(ClientEvent.ERROR, err)
        except Exception as err:
            _LOGGER.exception("[%s] Unexpected listener error", self.module_id)
            self.emit(ClientEvent.ERROR, err)
            await ws.close()

        info = CloseInfo(ws.close_code, ws.close_reason or "")
        _LOGGER.info(
            "[%s] Connection closed (code=%s, %d messages)",
            self.module_id,
            info.code,
            message_count,
        )

        if self._ws is not ws:
            # A newer transport already replaced this one
            self.emit(ClientEvent.CLOSE, info)
            return
        self._handle_close(info)

    def _handle_frame(self, raw: Any) -> None:
        self.emit(ClientEvent.MESSAGE, raw)

        try:
            value = decode_payload(raw)
        except ValueError:
            # Non-JSON frames are only reported as raw messages
            return
        if is_connection_established(value):
            self.emit(ClientEvent.CONNECTION_ESTABLISHED, value)
        self.emit(ClientEvent.JSON, value)
