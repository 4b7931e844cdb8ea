"""Native host bridge for applications embedded in the AIWIZE browser.

The host exposes a one-way ``send(channel, args)`` entry point. Requests
that expect an answer are completed when the host invokes the matching
``on_*_received`` callback on this object.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .const import BRIDGE_NAMESPACE
from .errors import CombinerBridgeError, CombinerBridgeUnavailable

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

HostSend = Callable[[str, list[Any]], None]


class _PendingRequest(Generic[T]):
    """Single-slot rendezvous between a request and its host callback."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._future: asyncio.Future[T] | None = None

    @property
    def waiting(self) -> bool:
        return self._future is not None and not self._future.done()

    def arm(self) -> asyncio.Future[T]:
        """Register a new waiter, failing any earlier one."""
        if self.waiting:
            _LOGGER.debug("[BrowserBackend] %s superseded by a new request", self.name)
            self._future.set_exception(  # type: ignore[union-attr]
                CombinerBridgeError(f"{self.name} request superseded")
            )
        self._future = asyncio.get_running_loop().create_future()
        return self._future

    def resolve(self, value: T) -> None:
        if not self.waiting:
            _LOGGER.debug("[BrowserBackend] Unsolicited %s callback ignored", self.name)
            return
        self._future.set_result(value)  # type: ignore[union-attr]

    def discard(self, future: asyncio.Future[T]) -> None:
        if self._future is future:
            self._future = None


class BrowserBackend:
    """Client for the browser's native application bridge.

    Each request primitive allows one outstanding request; issuing another
    while one is pending fails the earlier awaiter with
    ``CombinerBridgeError``.
    """

    def __init__(
        self,
        send: HostSend | None = None,
        *,
        namespace: str = BRIDGE_NAMESPACE,
    ) -> None:
        self._send = send
        self._namespace = namespace
        self._page_content: _PendingRequest[str] = _PendingRequest("getPageContent")
        self._page_info: _PendingRequest[tuple[str, str]] = _PendingRequest(
            "getPageInfo"
        )
        self._page_screenshots: _PendingRequest[list[str]] = _PendingRequest(
            "getPageScreenshots"
        )

    @property
    def available(self) -> bool:
        """Check if a host bridge is attached."""
        return self._send is not None

    def open_link(self, url: str) -> None:
        """Ask the browser to open ``url``."""
        if self._send is None:
            _LOGGER.debug("[BrowserBackend] No host bridge, cannot open %s", url)
            return
        self._send(f"{self._namespace}.openLink", [url])

    async def get_page_content(self) -> str:
        """Retrieve the full HTML content of the current page."""
        return await self._call(self._page_content)

    async def get_page_info(self) -> tuple[str, str]:
        """Retrieve the URL and title of the current page."""
        return await self._call(self._page_info)

    async def get_page_screenshots(self) -> list[str]:
        """Retrieve base64-encoded screenshots of the current page."""
        return await self._call(self._page_screenshots)

    # Host callbacks

    def on_page_content_received(self, success: bool, content: str) -> None:
        """Host callback answering ``get_page_content``."""
        _LOGGER.debug(
            "[BrowserBackend] onPageContentReceived: %s %d", success, len(content)
        )
        self._page_content.resolve(content)

    def on_page_info_received(self, link: str, title: str) -> None:
        """Host callback answering ``get_page_info``."""
        _LOGGER.debug("[BrowserBackend] onPageInfoReceived: %s %s", link, title)
        self._page_info.resolve((link, title))

    def on_page_screenshots_received(self, items: list[str]) -> None:
        """Host callback answering ``get_page_screenshots``."""
        _LOGGER.debug("[BrowserBackend] onPageScreenshotsReceived: %d", len(items))
        self._page_screenshots.resolve(list(items))

    async def _call(self, pending: _PendingRequest[T]) -> T:
        if self._send is None:
            raise CombinerBridgeUnavailable("Native host bridge is not available")

        future = pending.arm()
        try:
            self._send(f"{self._namespace}.{pending.name}", [])
            return await future
        finally:
            pending.discard(future)
