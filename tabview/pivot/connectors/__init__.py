"""Query engine connectors."""

from .http import HTTPQueryEngine

__all__ = ["HTTPQueryEngine"]
