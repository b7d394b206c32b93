"""Table schema model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.enums import ColumnType
from ..core.exceptions import SchemaError


class ColumnMetadata(BaseModel):
    """Type and display name of a single column."""

    type: ColumnType
    display_name: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)


class Schema(BaseModel):
    """Ordered column list with per-column metadata.

    Schemas are immutable; ``extend`` returns a new instance.
    """

    columns: tuple[str, ...] = ()
    column_metadata: dict[str, ColumnMetadata] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_metadata(self) -> Schema:
        """Every column must have metadata and column ids must be unique."""
        if len(set(self.columns)) != len(self.columns):
            raise ValueError("duplicate column ids in schema")
        missing = [c for c in self.columns if c not in self.column_metadata]
        if missing:
            raise ValueError(f"missing metadata for columns: {missing}")
        return self

    def __len__(self) -> int:
        return len(self.columns)

    def __contains__(self, column: object) -> bool:
        return column in self.column_metadata

    def _metadata(self, column: str) -> ColumnMetadata:
        try:
            return self.column_metadata[column]
        except KeyError:
            raise SchemaError(f"Unknown column: {column!r}") from None

    def column_type(self, column: str) -> ColumnType:
        return self._metadata(column).type

    def display_name(self, column: str) -> str:
        return self._metadata(column).display_name

    def extend(self, column: str, metadata: ColumnMetadata) -> Schema:
        """Return a new schema with ``column`` appended.

        Raises:
            SchemaError: If the column already exists
        """
        if column in self.column_metadata:
            raise SchemaError(f"Column already exists: {column!r}")
        return Schema(
            columns=(*self.columns, column),
            column_metadata={**self.column_metadata, column: metadata},
        )


# Synthetic tree columns appended to every fetched window, in order.
TREE_COLUMNS: tuple[tuple[str, ColumnMetadata], ...] = (
    ("_id", ColumnMetadata(type=ColumnType.INTEGER, display_name="_id")),
    ("_parentId", ColumnMetadata(type=ColumnType.INTEGER, display_name="_parentId")),
    ("_isOpen", ColumnMetadata(type=ColumnType.INTEGER, display_name="_isOpen")),
    ("_isLeaf", ColumnMetadata(type=ColumnType.INTEGER, display_name="_isLeaf")),
)


def extend_tree_schema(schema: Schema) -> Schema:
    """Extend a base schema with the synthetic tree columns."""
    out = schema
    for column, metadata in TREE_COLUMNS:
        out = out.extend(column, metadata)
    return out
