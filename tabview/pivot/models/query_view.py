"""Compiled query handle."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryView(BaseModel):
    """Compiled query for one view definition plus its total row count.

    The query object is opaque here; only the query engine interprets it.
    """

    query: Any
    row_count: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
