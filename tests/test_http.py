"""Tests for CombinerRestClient request shaping and error handling."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import aiohttp
import pytest

from combiner_client import CombinerRestClient
from combiner_client.errors import (
    CombinerClientError,
    CombinerConnectionError,
    CombinerResponseError,
    CombinerTimeout,
)

from .conftest import create_mock_response


@pytest.fixture
def client(mock_session: MagicMock) -> CombinerRestClient:
    """Create a REST client bound to the mock session."""
    return CombinerRestClient(mock_session, "notes", base_url="http://combiner:22003")


def request_args(mock_session: MagicMock) -> tuple[str, str, dict]:
    call = mock_session.request.call_args
    return call.args[0], call.args[1], call.kwargs


class TestCombinerRestClientInit:
    """Tests for client construction."""

    def test_module_id_required(self, mock_session: MagicMock) -> None:
        """Test empty module id is rejected."""
        with pytest.raises(ValueError, match="module_id"):
            CombinerRestClient(mock_session, "")

    async def test_headers(self, mock_session: MagicMock) -> None:
        """Test module and default headers are sent, defaults winning."""
        client = CombinerRestClient(
            mock_session,
            "notes",
            default_headers={"Authorization": "Bearer t", "Content-Type": "text/x"},
        )
        mock_session.request.return_value = create_mock_response(json_data=[])

        await client.list_dir()

        _, url, kwargs = request_args(mock_session)
        assert url == "http://localhost:22003/api/fs/list"
        assert kwargs["headers"] == {
            "Content-Type": "text/x",
            "X-Module-Id": "notes",
            "Authorization": "Bearer t",
        }


class TestFilesystemApi:
    """Tests for the /api/fs endpoints."""

    async def test_list_dir(self, client, mock_session: MagicMock) -> None:
        """Test listing passes the path as a query parameter."""
        mock_session.request.return_value = create_mock_response(
            json_data=[{"name": "a.txt"}]
        )

        result = await client.list_dir("docs")

        method, url, kwargs = request_args(mock_session)
        assert (method, url) == ("GET", "http://combiner:22003/api/fs/list")
        assert kwargs["params"] == {"path": "docs"}
        assert "data" not in kwargs
        assert result == [{"name": "a.txt"}]

    async def test_read_file(self, client, mock_session: MagicMock) -> None:
        """Test reading posts path and encoding."""
        mock_session.request.return_value = create_mock_response(
            json_data={"content": "hello"}
        )

        result = await client.read_file("notes/a.txt")

        method, url, kwargs = request_args(mock_session)
        assert (method, url) == ("POST", "http://combiner:22003/api/fs/read")
        assert json.loads(kwargs["data"]) == {"path": "notes/a.txt", "encoding": "utf-8"}
        assert result == {"content": "hello"}

    async def test_write_file(self, client, mock_session: MagicMock) -> None:
        """Test writing posts path, content and encoding."""
        mock_session.request.return_value = create_mock_response(json_data={"ok": True})

        await client.write_file("a.txt", "Hello", encoding="latin-1")

        method, url, kwargs = request_args(mock_session)
        assert (method, url) == ("POST", "http://combiner:22003/api/fs/write")
        assert json.loads(kwargs["data"]) == {
            "path": "a.txt",
            "content": "Hello",
            "encoding": "latin-1",
        }


class TestDocumentApi:
    """Tests for the /api/db endpoints."""

    async def test_db_create(self, client, mock_session: MagicMock) -> None:
        """Test create posts to the collection path."""
        mock_session.request.return_value = create_mock_response(json_data={"id": "1"})

        result = await client.db_create("items", {"title": "x"})

        method, url, kwargs = request_args(mock_session)
        assert (method, url) == ("POST", "http://combiner:22003/api/db/notes/items")
        assert json.loads(kwargs["data"]) == {"title": "x"}
        assert result == {"id": "1"}

    async def test_db_create_without_payload(self, client, mock_session: MagicMock) -> None:
        """Test a missing body is sent as an empty object."""
        mock_session.request.return_value = create_mock_response(json_data={})

        await client.db_create("items", None)

        _, _, kwargs = request_args(mock_session)
        assert kwargs["data"] == "{}"

    async def test_db_list_with_filter(self, client, mock_session: MagicMock) -> None:
        """Test a non-empty filter is JSON-encoded into the query."""
        mock_session.request.return_value = create_mock_response(json_data=[])

        await client.db_list("items", {"done": False})

        method, url, kwargs = request_args(mock_session)
        assert (method, url) == ("GET", "http://combiner:22003/api/db/notes/items")
        assert kwargs["params"] == {"filter": '{"done": false}'}

    async def test_db_list_empty_filter(self, client, mock_session: MagicMock) -> None:
        """Test an empty filter adds no query parameter."""
        mock_session.request.return_value = create_mock_response(json_data=[])

        await client.db_list("items", {})

        _, _, kwargs = request_args(mock_session)
        assert "params" not in kwargs

    @pytest.mark.parametrize(
        ("method_name", "http_method", "extra"),
        [
            ("db_read", "GET", ()),
            ("db_update", "PUT", ({"title": "y"},)),
            ("db_delete", "DELETE", ()),
        ],
    )
    async def test_document_paths_are_encoded(
        self, mock_session: MagicMock, method_name, http_method, extra
    ) -> None:
        """Test module, collection and id are percent-encoded path segments."""
        client = CombinerRestClient(mock_session, "my mod", base_url="http://c:1")
        mock_session.request.return_value = create_mock_response(json_data={})

        await getattr(client, method_name)("a/b", "x y", *extra)

        method, url, kwargs = request_args(mock_session)
        assert method == http_method
        assert url == "http://c:1/api/db/my%20mod/a%2Fb/x%20y"
        if extra:
            assert json.loads(kwargs["data"]) == extra[0]


class TestSessionToken:
    """Tests for get_session_token()."""

    async def test_get_session_token(self, client, mock_session: MagicMock) -> None:
        """Test the token field is returned."""
        mock_session.request.return_value = create_mock_response(
            json_data={"token": "abc123"}
        )

        assert await client.get_session_token() == "abc123"
        method, url, _ = request_args(mock_session)
        assert (method, url) == ("GET", "http://combiner:22003/get-token")

    async def test_non_json_token_body(self, client, mock_session: MagicMock) -> None:
        """Test a plain-text body is reported as a client error."""
        mock_session.request.return_value = create_mock_response(
            text_data="abc", content_type="text/plain"
        )

        with pytest.raises(CombinerClientError, match="token"):
            await client.get_session_token()

    async def test_missing_token_field(self, client, mock_session: MagicMock) -> None:
        """Test a JSON body without a token is reported as a client error."""
        mock_session.request.return_value = create_mock_response(
            json_data={"expires": 60}
        )

        with pytest.raises(CombinerClientError, match="token"):
            await client.get_session_token()


class TestResponseHandling:
    """Tests for response decoding and error mapping."""

    async def test_text_response(self, client, mock_session: MagicMock) -> None:
        """Test non-JSON responses are returned as text."""
        mock_session.request.return_value = create_mock_response(
            text_data="plain body", content_type="text/plain; charset=utf-8"
        )

        assert await client.list_dir() == "plain body"

    async def test_error_with_json_body(self, client, mock_session: MagicMock) -> None:
        """Test non-2xx responses raise with the decoded error body."""
        mock_session.request.return_value = create_mock_response(
            status=404, text_data='{"error": "missing"}', reason="Not Found"
        )

        with pytest.raises(CombinerResponseError, match="HTTP 404: Not Found") as exc_info:
            await client.db_read("items", "1")

        assert exc_info.value.status == 404
        assert exc_info.value.payload == {"error": "missing"}

    async def test_error_with_text_body(self, client, mock_session: MagicMock) -> None:
        """Test non-JSON error bodies are kept as raw text."""
        mock_session.request.return_value = create_mock_response(
            status=500, text_data="Internal failure", reason="Internal Server Error"
        )

        with pytest.raises(CombinerResponseError) as exc_info:
            await client.write_file("a.txt", "x")

        assert exc_info.value.status == 500
        assert exc_info.value.payload == "Internal failure"

    async def test_timeout(self, client, mock_session: MagicMock) -> None:
        """Test request timeouts are mapped to CombinerTimeout."""
        mock_session.request.side_effect = TimeoutError()

        with pytest.raises(CombinerTimeout, match="timed out"):
            await client.list_dir()

    async def test_client_error(self, client, mock_session: MagicMock) -> None:
        """Test aiohttp failures are mapped to CombinerConnectionError."""
        mock_session.request.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(CombinerConnectionError, match="GET /api/fs/list failed"):
            await client.list_dir()
