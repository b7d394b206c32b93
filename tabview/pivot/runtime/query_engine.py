"""Query engine interface and request helpers.

The query engine (schema model, pivot tree construction, tree-to-flat
query compilation, row evaluation) lives outside this package. It is
consumed through the QueryEngine protocol; any object with these three
coroutines works.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from ..core.exceptions import CompileError, FetchError, PivotError
from ..models.data_view import PagedDataView, mk_data_view
from ..models.query_view import QueryView
from ..models.schema import Schema
from ..models.table_rep import TableRep
from ..models.view_params import ViewParams

logger = logging.getLogger(__name__)


class QueryEngine(Protocol):
    """Protocol for query engine connections."""

    async def compile_view(
        self, base_query: Any, base_schema: Schema, view_params: ViewParams
    ) -> Any:
        """Compile a view definition into a flat, sorted tree query.

        Returns:
            Opaque compiled query accepted by ``row_count`` and ``eval_query``
        """
        ...

    async def row_count(self, query: Any) -> int:
        """Total number of rows ``query`` produces."""
        ...

    async def eval_query(self, query: Any, offset: int, limit: int) -> TableRep:
        """Evaluate rows ``[offset, offset + limit)`` of ``query``."""
        ...


async def request_query_view(
    engine: QueryEngine,
    base_query: Any,
    base_schema: Schema,
    view_params: ViewParams,
    *,
    request_id: int | None = None,
) -> QueryView:
    """Compile ``view_params`` and count the rows of the resulting query.

    Raises:
        CompileError: If the engine fails to compile or count
    """
    try:
        query = await engine.compile_view(base_query, base_schema, view_params)
        row_count = await engine.row_count(query)
    except CompileError:
        raise
    except Exception as e:
        raise CompileError(
            f"Failed to compile view: {e}",
            request_id=request_id,
            status_code=getattr(e, "status_code", None),
        ) from e
    return QueryView(query=query, row_count=row_count)


async def request_data_view(
    engine: QueryEngine,
    view_params: ViewParams,
    query_view: QueryView,
    offset: int,
    limit: int,
    *,
    request_id: int | None = None,
) -> PagedDataView:
    """Fetch one window of ``query_view`` and attach tree metadata.

    Raises:
        FetchError: If the engine fails to evaluate the window or its rows
            are malformed
    """
    try:
        table_data = await engine.eval_query(query_view.query, offset, limit)
    except FetchError:
        raise
    except Exception as e:
        raise FetchError(
            f"Failed to fetch rows: {e}",
            request_id=request_id,
            offset=offset,
            limit=limit,
            status_code=getattr(e, "status_code", None),
        ) from e

    try:
        return mk_data_view(view_params, query_view.row_count, offset, table_data)
    except (PivotError, KeyError, TypeError, ValueError) as e:
        raise FetchError(
            f"Malformed rows in window: {e}",
            request_id=request_id,
            offset=offset,
            limit=limit,
        ) from e
