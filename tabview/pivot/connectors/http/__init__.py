"""Remote query engine over HTTP."""

from .client import HTTPClient
from .engine import HTTPQueryEngine

__all__ = ["HTTPClient", "HTTPQueryEngine"]
