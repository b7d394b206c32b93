"""Unit tests for the HTTP query engine connector.

Transport is mocked; no network access.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from fakes import BASE_SCHEMA

from tabview.pivot.connectors.http import HTTPClient, HTTPQueryEngine
from tabview.pivot.core import QueryEngineError
from tabview.pivot.models import ViewParams


@pytest.fixture
def http_client():
    client = MagicMock(spec=HTTPClient)
    client.post = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def engine(http_client):
    return HTTPQueryEngine("http://query.local", http_client=http_client)


class TestHTTPQueryEngine:
    """Test request payloads and response parsing."""

    @pytest.mark.asyncio
    async def test_compile_view_posts_view_definition(self, engine, http_client):
        http_client.post.return_value = {"query": {"id": "q1"}}
        params = ViewParams(vpivots=("region",)).open_path(["east"])

        query = await engine.compile_view("sales", BASE_SCHEMA, params)

        assert query == {"id": "q1"}
        url, payload = http_client.post.call_args.args
        assert url == "/compile"
        assert payload["base_query"] == "sales"
        assert payload["view_params"]["vpivots"] == ["region"]
        assert payload["view_params"]["open_paths"]["paths"] == [["east"]]
        assert payload["base_schema"]["column_metadata"]["sales"]["type"] == "real"

    @pytest.mark.asyncio
    async def test_compile_view_missing_query(self, engine, http_client):
        http_client.post.return_value = {}
        with pytest.raises(QueryEngineError, match="missing 'query'"):
            await engine.compile_view("sales", BASE_SCHEMA, ViewParams())

    @pytest.mark.asyncio
    async def test_row_count(self, engine, http_client):
        http_client.post.return_value = {"row_count": "42"}
        assert await engine.row_count({"id": "q1"}) == 42
        http_client.post.assert_awaited_once_with("/rowcount", {"query": {"id": "q1"}})

    @pytest.mark.asyncio
    async def test_row_count_malformed(self, engine, http_client):
        http_client.post.return_value = {"rows": 1}
        with pytest.raises(QueryEngineError, match="Malformed /rowcount"):
            await engine.row_count({"id": "q1"})

    @pytest.mark.asyncio
    async def test_eval_query_parses_table(self, engine, http_client):
        http_client.post.return_value = {
            "schema": BASE_SCHEMA.model_dump(mode="json"),
            "row_data": [{"_depth": 1, "_path0": "east", "region": "east"}],
        }

        table = await engine.eval_query({"id": "q1"}, 10, 5)

        assert table.schema == BASE_SCHEMA
        assert table.row_data[0]["region"] == "east"
        http_client.post.assert_awaited_once_with(
            "/eval", {"query": {"id": "q1"}, "offset": 10, "limit": 5}
        )

    @pytest.mark.asyncio
    async def test_eval_query_bad_schema(self, engine, http_client):
        http_client.post.return_value = {"schema": {"columns": ["a"]}, "row_data": []}
        with pytest.raises(QueryEngineError, match="Malformed /eval"):
            await engine.eval_query({"id": "q1"}, 0, 5)

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, engine, http_client):
        async with engine:
            pass
        http_client.close.assert_awaited_once()


class TestHTTPClient:
    """Test HTTPClient session handling and error mapping."""

    def test_base_url_joined(self):
        client = HTTPClient(base_url="http://query.local/", timeout=5.0)
        assert client.timeout.total == 5.0
        assert client._url("/eval") == "http://query.local/eval"
        assert client._url("http://other/eval") == "http://other/eval"

    @pytest.mark.asyncio
    async def test_session_created_lazily(self):
        client = HTTPClient()
        assert client._session is None
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        await client.close()
        assert session.closed

    @pytest.mark.asyncio
    async def test_http_error_maps_status(self):
        client = HTTPClient(base_url="http://query.local")
        response = MagicMock()
        response.raise_for_status.side_effect = aiohttp.ClientResponseError(
            request_info=MagicMock(), history=(), status=503, message="Service Unavailable"
        )
        session = MagicMock(closed=False)
        session.post.return_value.__aenter__.return_value = response
        session.post.return_value.__aexit__.return_value = False
        client._session = session

        with pytest.raises(QueryEngineError) as exc_info:
            await client.post("/compile", {})

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_returns_json(self):
        client = HTTPClient(base_url="http://query.local")
        response = MagicMock()
        response.json = AsyncMock(return_value={"row_count": 3})
        session = MagicMock(closed=False)
        session.post.return_value.__aenter__.return_value = response
        session.post.return_value.__aexit__.return_value = False
        client._session = session

        assert await client.post("/rowcount", {"query": 1}) == {"row_count": 3}
        session.post.assert_called_once_with(
            "http://query.local/rowcount", json={"query": 1}, headers=None
        )
