"""Client for the Combiner labeling (context search) endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from .const import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT, MOCK_DELAY
from .errors import CombinerClientError
from .http import CombinerHttpClient
from .mocks import MOCK_CONTEXTS
from .models import ApiResponse, Context, SearchContextsBody

_LOGGER = logging.getLogger(__name__)


class ContextManagerClient(CombinerHttpClient):
    """Search and process labeled contexts.

    In test mode every call is answered from ``MOCK_CONTEXTS`` without
    touching the network.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        base_url: str = DEFAULT_BASE_URL,
        default_headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        test_mode: bool = False,
        mock_delay: float = MOCK_DELAY,
    ) -> None:
        super().__init__(
            session,
            base_url=base_url,
            default_headers=default_headers,
            timeout=timeout,
        )
        self._test_mode = test_mode
        self._mock_delay = mock_delay

    @property
    def test_mode(self) -> bool:
        """Whether calls are answered from the mock dataset."""
        return self._test_mode

    @test_mode.setter
    def test_mode(self, enabled: bool) -> None:
        _LOGGER.debug("Test mode %s", "enabled" if enabled else "disabled")
        self._test_mode = enabled

    async def search_contexts(
        self, body: SearchContextsBody | None = None
    ) -> ApiResponse[list[Context]]:
        """Search for contexts in the vector database.

        Args:
            body: Search filters, see ``SearchContextsBody``

        Returns:
            Response envelope with the matching contexts
        """
        if self._test_mode:
            await self._simulate_latency()
            return ApiResponse(success=True, data=filter_contexts(MOCK_CONTEXTS, body))

        payload = body.to_dict() if body is not None else {}
        data = await self._request(
            "POST", "/api/labeling/search", body=payload, send_body=True
        )
        response = _parse_envelope(data)
        if isinstance(response.data, list):
            response.data = [Context.from_dict(item) for item in response.data]
        return response

    async def process_contexts(self, body: dict[str, Any] | None = None) -> ApiResponse[Any]:
        """Submit contexts for labeling."""
        if self._test_mode:
            await self._simulate_latency()
            return ApiResponse(success=True)

        data = await self._request(
            "POST", "/api/labeling/process", body=body, send_body=True
        )
        return _parse_envelope(data)

    async def _simulate_latency(self) -> None:
        if self._mock_delay > 0:
            await asyncio.sleep(self._mock_delay)


def _parse_envelope(data: Any) -> ApiResponse[Any]:
    if not isinstance(data, dict):
        raise CombinerClientError("Unexpected labeling response: not a JSON object")
    return ApiResponse.from_dict(data)


def filter_contexts(
    contexts: tuple[Context, ...] | list[Context],
    body: SearchContextsBody | None,
) -> list[Context]:
    """Apply search filters, sorting and limit to a list of contexts.

    Text matching is case-insensitive: ``query`` is a substring match on the
    name, content or any tag; ``category`` and ``tags`` match exactly.
    """
    result = list(contexts)
    if body is None:
        return result

    if body.query:
        query = body.query.lower()
        result = [
            c
            for c in result
            if query in (c.name or "").lower()
            or query in c.content.lower()
            or any(query in tag.lower() for tag in c.tags)
        ]

    if body.category:
        categories = {category.lower() for category in body.category}
        result = [c for c in result if (c.category or "").lower() in categories]

    if body.tags:
        wanted = {tag.lower() for tag in body.tags}
        result = [c for c in result if any(tag.lower() in wanted for tag in c.tags)]

    if body.sort == "updatedAt":
        result.sort(
            key=lambda c: c.updated_at_datetime,
            reverse=body.order != "asc",
        )

    if body.limit and body.limit > 0:
        result = result[: body.limit]

    return result
