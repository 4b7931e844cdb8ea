"""HTTP client for Combiner Service REST endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote, urljoin

import aiohttp

from .const import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from .errors import (
    CombinerClientError,
    CombinerConnectionError,
    CombinerResponseError,
    CombinerTimeout,
)

_LOGGER = logging.getLogger(__name__)


class CombinerHttpClient:
    """Shared request plumbing for the Combiner REST gateway.

    Non-2xx responses raise ``CombinerResponseError`` carrying the status and
    the decoded error body. Successful JSON responses are decoded, anything
    else is returned as text.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        base_url: str = DEFAULT_BASE_URL,
        default_headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._base_url = base_url
        self._default_headers = dict(default_headers or {})
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        """Base address of the service."""
        return self._base_url

    def _url(self, path: str) -> str:
        return urljoin(self._base_url, path)

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", **self._default_headers}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
        send_body: bool = False,
    ) -> Any:
        """Perform a request and decode the response.

        Args:
            method: HTTP method
            path: Absolute path on the service
            params: Query parameters
            body: JSON body, sent as ``{}`` when None and ``send_body`` is set
            send_body: Whether the request carries a JSON body

        Raises:
            CombinerResponseError: On non-2xx responses
            CombinerTimeout: If the request times out
            CombinerConnectionError: If the request fails at the network level
        """
        url = self._url(path)
        kwargs: dict[str, Any] = {
            "headers": self._headers(),
            "timeout": aiohttp.ClientTimeout(total=self._timeout),
        }
        if params:
            kwargs["params"] = params
        if send_body:
            kwargs["data"] = json.dumps(body if body is not None else {})

        _LOGGER.debug("%s %s", method, url)
        try:
            async with self._session.request(method, url, **kwargs) as resp:
                return await self._handle_response(resp)
        except TimeoutError as err:
            raise CombinerTimeout(f"{method} {path} timed out") from err
        except aiohttp.ClientError as err:
            raise CombinerConnectionError(f"{method} {path} failed") from err

    @staticmethod
    async def _handle_response(resp: aiohttp.ClientResponse) -> Any:
        if not 200 <= resp.status < 300:
            text = await resp.text()
            try:
                payload: Any = json.loads(text)
            except ValueError:
                payload = text
            raise CombinerResponseError(
                resp.status, f"HTTP {resp.status}: {resp.reason}", payload
            )

        content_type = resp.headers.get("Content-Type", "")
        if "application/json" in content_type:
            return await resp.json()
        return await resp.text()


class CombinerRestClient(CombinerHttpClient):
    """Filesystem, document store and token endpoints scoped to one module."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        module_id: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        default_headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        if not module_id:
            raise ValueError("module_id is required")
        super().__init__(
            session,
            base_url=base_url,
            default_headers=default_headers,
            timeout=timeout,
        )
        self.module_id = module_id

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Module-Id": self.module_id,
            **self._default_headers,
        }

    def _db_path(self, collection: str, doc_id: str | None = None) -> str:
        path = f"/api/db/{quote(self.module_id, safe='')}/{quote(collection, safe='')}"
        if doc_id is not None:
            path = f"{path}/{quote(doc_id, safe='')}"
        return path

    async def get_session_token(self) -> str:
        """Fetch a session token from /get-token."""
        data = await self._request("GET", "/get-token")
        if not isinstance(data, dict) or "token" not in data:
            raise CombinerClientError("Unexpected token response: no token field")
        return data["token"]

    # Filesystem API

    async def list_dir(self, path: str = ".") -> Any:
        """List a directory in the module filesystem."""
        return await self._request("GET", "/api/fs/list", params={"path": path})

    async def read_file(self, path: str, encoding: str = "utf-8") -> Any:
        """Read a file from the module filesystem."""
        return await self._request(
            "POST",
            "/api/fs/read",
            body={"path": path, "encoding": encoding},
            send_body=True,
        )

    async def write_file(self, path: str, content: str, encoding: str = "utf-8") -> Any:
        """Write a file to the module filesystem."""
        return await self._request(
            "POST",
            "/api/fs/write",
            body={"path": path, "content": content, "encoding": encoding},
            send_body=True,
        )

    # Document store API

    async def db_create(self, collection: str, payload: Any) -> Any:
        """Create a document in ``collection``."""
        return await self._request(
            "POST", self._db_path(collection), body=payload, send_body=True
        )

    async def db_list(
        self, collection: str, filter: dict[str, Any] | None = None
    ) -> Any:
        """List documents in ``collection``, optionally filtered."""
        params = {"filter": json.dumps(filter)} if filter else None
        return await self._request("GET", self._db_path(collection), params=params)

    async def db_read(self, collection: str, doc_id: str) -> Any:
        """Read one document."""
        return await self._request("GET", self._db_path(collection, doc_id))

    async def db_update(self, collection: str, doc_id: str, update: Any) -> Any:
        """Update one document."""
        return await self._request(
            "PUT", self._db_path(collection, doc_id), body=update, send_body=True
        )

    async def db_delete(self, collection: str, doc_id: str) -> Any:
        """Delete one document."""
        return await self._request("DELETE", self._db_path(collection, doc_id))
