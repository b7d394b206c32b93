"""Query engine backed by a remote query service.

Wire format (JSON over HTTP POST):
    /compile  {"base_query", "base_schema", "view_params"} -> {"query"}
    /rowcount {"query"} -> {"row_count"}
    /eval     {"query", "offset", "limit"} -> {"schema", "row_data"}

The compiled query is whatever JSON value the service returns from
/compile; it is passed back verbatim.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import QueryEngineError
from ...models.schema import Schema
from ...models.table_rep import TableRep
from ...models.view_params import ViewParams
from .client import HTTPClient

logger = logging.getLogger(__name__)


class HTTPQueryEngine:
    """QueryEngine implementation talking to a remote query service."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        http_client: HTTPClient | None = None,
    ) -> None:
        self._http = http_client or HTTPClient(base_url=base_url, timeout=timeout)

    async def compile_view(
        self, base_query: Any, base_schema: Schema, view_params: ViewParams
    ) -> Any:
        payload = {
            "base_query": base_query,
            "base_schema": base_schema.model_dump(mode="json"),
            "view_params": view_params.model_dump(mode="json"),
        }
        data = await self._http.post("/compile", payload)
        if "query" not in data:
            raise QueryEngineError("Malformed /compile response: missing 'query'")
        return data["query"]

    async def row_count(self, query: Any) -> int:
        data = await self._http.post("/rowcount", {"query": query})
        try:
            return int(data["row_count"])
        except (KeyError, TypeError, ValueError) as e:
            raise QueryEngineError(f"Malformed /rowcount response: {e}") from e

    async def eval_query(self, query: Any, offset: int, limit: int) -> TableRep:
        data = await self._http.post(
            "/eval", {"query": query, "offset": offset, "limit": limit}
        )
        try:
            schema = Schema.model_validate(data["schema"])
            rows = list(data.get("row_data", []))
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise QueryEngineError(f"Malformed /eval response: {e}") from e
        logger.debug(
            "Evaluated window",
            extra={"offset": offset, "limit": limit, "rows": len(rows)},
        )
        return TableRep(schema=schema, row_data=rows)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> HTTPQueryEngine:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
