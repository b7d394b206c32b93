"""Windowed row set handed to the grid layer.

A PagedDataView is an offset-addressed slice of the rows of one compiled
query. ``mk_data_view`` derives the synthetic tree columns (``_id``,
``_parentId``, ``_isOpen``, ``_isLeaf``) for every row of a fetched window.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .schema import Schema, extend_tree_schema
from .table_rep import Row, TableRep
from .view_params import Path, ViewParams

DEPTH_FIELD = "_depth"
PATH_FIELD_PREFIX = "_path"


@dataclass(frozen=True)
class PagedDataView:
    """Rows ``[offset, offset + len(rows))`` of a query with ``total_row_count`` rows.

    Attributes:
        schema: Base schema extended with the synthetic tree columns
        total_row_count: Row count of the owning query
        offset: Absolute index of the first row in ``rows``
        rows: Row records in fetch order
    """

    schema: Schema
    total_row_count: int
    offset: int
    rows: list[Row] = field(default_factory=list)

    @property
    def length(self) -> int:
        """Total number of rows in the underlying query."""
        return self.total_row_count

    @property
    def item_count(self) -> int:
        """Number of rows loaded in this window."""
        return len(self.rows)

    def contains_index(self, index: int) -> bool:
        return self.offset <= index < self.offset + len(self.rows)

    def get_item(self, index: int) -> Row | None:
        """Row at absolute ``index``, or None if outside the loaded window."""
        if not self.contains_index(index):
            return None
        return self.rows[index - self.offset]


def row_path(row: Row, depth: int) -> Path:
    """Non-empty path segments ``_path0 .. _path{depth-1}`` of a row."""
    path = []
    for i in range(depth):
        elem = row.get(f"{PATH_FIELD_PREFIX}{i}")
        if elem:
            path.append(str(elem))
    return tuple(path)


def mk_data_view(
    view_params: ViewParams,
    row_count: int,
    offset: int,
    table_data: TableRep,
) -> PagedDataView:
    """Build a PagedDataView for one fetched window.

    Args:
        view_params: View definition the window's query was compiled from
        row_count: Total row count of the query
        offset: Window offset the rows were fetched at
        table_data: Raw rows from the query engine

    Returns:
        PagedDataView with tree metadata on every row
    """
    n_pivots = view_params.pivot_count
    open_paths = view_params.open_paths
    rows: list[Row] = []
    # Last seen row id per depth, within this window only.
    parent_ids: dict[int, int] = {}

    for i, raw in enumerate(table_data.row_data):
        row = dict(raw)
        depth = int(row[DEPTH_FIELD])
        parent_ids[depth] = i
        row["_isOpen"] = open_paths.is_open(row_path(row, n_pivots))
        row["_isLeaf"] = depth > n_pivots
        row["_id"] = i
        row["_parentId"] = parent_ids.get(depth - 1) if depth > 0 else None
        rows.append(row)

    return PagedDataView(
        schema=extend_tree_schema(table_data.schema),
        total_row_count=row_count,
        offset=offset,
        rows=rows,
    )
