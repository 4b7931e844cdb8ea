"""Event dispatch for Combiner client notifications."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

_LOGGER = logging.getLogger(__name__)

EventHandler = Callable[..., Any]


class ClientEvent(str, Enum):
    """Notification channels raised by the channel client."""

    OPEN = "open"
    CLOSE = "close"
    ERROR = "error"
    MESSAGE = "message"
    JSON = "json"
    RECONNECTING = "reconnecting"
    CONNECTION_ESTABLISHED = "connection_established"


class EventEmitter:
    """Minimal publish/subscribe table keyed by ``ClientEvent``.

    Handlers run in registration order. A handler that raises is logged and
    skipped; the remaining handlers on the channel still run. Handlers that
    return a coroutine are scheduled on the running loop.
    """

    def __init__(self) -> None:
        self._handlers: dict[ClientEvent, list[EventHandler]] = {
            event: [] for event in ClientEvent
        }
        self._handler_tasks: set[asyncio.Task[Any]] = set()

    def on(self, event: ClientEvent | str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe ``handler`` to ``event``.

        Returns:
            Callable that removes the subscription.
        """
        channel = ClientEvent(event)
        handlers = self._handlers[channel]
        if handler not in handlers:
            handlers.append(handler)

        def _unsubscribe() -> None:
            self.off(channel, handler)

        return _unsubscribe

    def off(self, event: ClientEvent | str, handler: EventHandler) -> None:
        """Remove ``handler`` from ``event`` if subscribed."""
        handlers = self._handlers[ClientEvent(event)]
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: ClientEvent | str) -> int:
        """Return the number of handlers subscribed to ``event``."""
        return len(self._handlers[ClientEvent(event)])

    def emit(self, event: ClientEvent | str, *args: Any) -> None:
        """Invoke every handler subscribed to ``event`` with ``args``."""
        channel = ClientEvent(event)
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._handlers[channel]):
            try:
                result = handler(*args)
            except Exception:
                _LOGGER.exception("Handler for '%s' raised", channel.value)
                continue
            if inspect.iscoroutine(result):
                self._schedule_handler(channel, result)

    def _schedule_handler(self, channel: ClientEvent, coro: Any) -> None:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            _LOGGER.warning(
                "Async handler for '%s' dropped: no running event loop",
                channel.value,
            )
            return
        self._handler_tasks.add(task)
        task.add_done_callback(lambda t: self._handler_done(channel, t))

    def _handler_done(self, channel: ClientEvent, task: asyncio.Task[Any]) -> None:
        self._handler_tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            _LOGGER.error(
                "Async handler for '%s' raised",
                channel.value,
                exc_info=(type(err), err, err.__traceback__),
            )
