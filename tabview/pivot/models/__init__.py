"""Data models for the pivot view.

Model Categories:
    - Schema: Schema, ColumnMetadata
    - View definition: ViewParams, OpenPaths
    - Query results: QueryView, TableRep, PagedDataView
    - Application state: AppState, ViewState and their transitions

All models are immutable. View definitions and schemas are Pydantic v2
frozen models; the state snapshots and row containers are frozen
dataclasses.
"""

from .data_view import PagedDataView, mk_data_view, row_path
from .query_view import QueryView
from .schema import TREE_COLUMNS, ColumnMetadata, Schema, extend_tree_schema
from .state import (
    AppState,
    ViewState,
    clamp_and_set_query_view,
    set_data_view,
    set_error,
    set_loading,
    set_view_params,
    set_viewport,
)
from .table_rep import Row, TableRep
from .view_params import OpenPaths, Path, ViewParams

__all__ = [
    "AppState",
    "ColumnMetadata",
    "OpenPaths",
    "PagedDataView",
    "Path",
    "QueryView",
    "Row",
    "Schema",
    "TREE_COLUMNS",
    "TableRep",
    "ViewParams",
    "ViewState",
    "clamp_and_set_query_view",
    "extend_tree_schema",
    "mk_data_view",
    "row_path",
    "set_data_view",
    "set_error",
    "set_loading",
    "set_view_params",
    "set_viewport",
]
