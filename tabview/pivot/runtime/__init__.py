"""Runtime orchestration components."""

from .loading import LoadingTimer
from .paging import PagingConfig, PagingPolicy, clamp_viewport, contains, fetch_params
from .query_engine import QueryEngine, request_data_view, request_query_view
from .requester import PivotRequester, RequesterConfig
from .store import StateRef

__all__ = [
    "LoadingTimer",
    "PagingConfig",
    "PagingPolicy",
    "PivotRequester",
    "QueryEngine",
    "RequesterConfig",
    "StateRef",
    "clamp_viewport",
    "contains",
    "fetch_params",
    "request_data_view",
    "request_query_view",
]
