"""Core components."""

from .enums import ColumnType, IndicatorState
from .exceptions import (
    CompileError,
    FetchError,
    PivotError,
    QueryEngineError,
    SchemaError,
    StaleWriteError,
    ValidationError,
)

__all__ = [
    "ColumnType",
    "IndicatorState",
    "PivotError",
    "QueryEngineError",
    "CompileError",
    "FetchError",
    "SchemaError",
    "StaleWriteError",
    "ValidationError",
]
