"""Raw query engine result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .schema import Schema

Row = dict[str, Any]


@dataclass(frozen=True)
class TableRep:
    """Schema plus ordered row records as returned by ``eval_query``.

    Tree queries produce rows with a ``_depth`` field and one ``_path{i}``
    field per pivot level.
    """

    schema: Schema
    row_data: list[Row] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.row_data)
