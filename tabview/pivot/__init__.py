"""Tabview Pivot - keeps a windowed pivot-tree view in sync with a query engine."""

from .connectors import HTTPQueryEngine
from .core import (
    ColumnType,
    CompileError,
    FetchError,
    IndicatorState,
    PivotError,
    QueryEngineError,
    SchemaError,
    StaleWriteError,
    ValidationError,
)
from .models import (
    AppState,
    ColumnMetadata,
    OpenPaths,
    PagedDataView,
    QueryView,
    Schema,
    TableRep,
    ViewParams,
    ViewState,
    mk_data_view,
)
from .runtime import (
    LoadingTimer,
    PagingConfig,
    PagingPolicy,
    PivotRequester,
    QueryEngine,
    RequesterConfig,
    StateRef,
)

__version__ = "0.1.0"

__all__ = [
    # Core enums
    "ColumnType",
    "IndicatorState",
    # Models
    "AppState",
    "ColumnMetadata",
    "OpenPaths",
    "PagedDataView",
    "QueryView",
    "Schema",
    "TableRep",
    "ViewParams",
    "ViewState",
    "mk_data_view",
    # Runtime
    "LoadingTimer",
    "PagingConfig",
    "PagingPolicy",
    "PivotRequester",
    "QueryEngine",
    "RequesterConfig",
    "StateRef",
    # Connectors
    "HTTPQueryEngine",
    # Exceptions
    "PivotError",
    "QueryEngineError",
    "CompileError",
    "FetchError",
    "SchemaError",
    "StaleWriteError",
    "ValidationError",
]
