"""Pivot requester: reconciles view state changes with query requests.

The PivotRequester listens for changes on the shared StateRef and decides,
for every change, whether a new query must be compiled, a new row window
fetched, or nothing done.

Architecture:
    Two-stage pipeline per view definition:
    1. compile: ViewParams -> QueryView (query + row count); on resolution
       the viewport is clamped to the new row count and the QueryView is
       written to state
    2. fetch: QueryView + viewport window -> PagedDataView, written to state

    A changed view definition (identity comparison) starts stage 1. An
    unchanged definition with the viewport outside the last issued window
    starts stage 2 against the already resolved QueryView.

Design Decisions:
    - "pending" tracking fields hold the most recently *issued* request
      parameters, which may or may not have completed. State changes are
      compared against what is displayed OR already requested.
    - No cancellation: the query engine cannot abort in-flight work. Every
      request carries a per-stage id; a completion whose id is no longer the
      latest issued for its stage is abandoned (discarded, never written).
    - A new view definition abandons all outstanding fetches and clears
      the resolved QueryView, so rows of a stale view are never installed.
    - No retries: failures propagate to awaiting callers and to the store's
      error channel.

See Also:
    - PagingPolicy: fetch window, clamp and containment rules
    - LoadingTimer: debounced loading indicator
    - StateRef: versioned state container
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from time import perf_counter
from typing import Any

from ..core.enums import IndicatorState
from ..models.data_view import PagedDataView
from ..models.query_view import QueryView
from ..models.state import AppState, clamp_and_set_query_view, set_data_view, set_loading
from ..models.view_params import ViewParams
from .loading import LoadingTimer
from .paging import PagingPolicy
from .query_engine import QueryEngine, request_data_view, request_query_view
from .store import StateRef
from .telemetry import (
    log_compile_issued,
    log_compile_resolved,
    log_fetch_issued,
    log_fetch_resolved,
    log_request_abandoned,
    log_request_failed,
)

logger = logging.getLogger(__name__)

COMPILE = "compile"
FETCH = "fetch"


@dataclass(frozen=True)
class RequesterConfig:
    """Requester settings.

    Attributes:
        loading_delay_ms: Delay before the loading indicator is revealed
    """

    loading_delay_ms: int = 200


class PivotRequester:
    """Issues compile and fetch requests in response to state changes."""

    def __init__(
        self,
        *,
        paging: PagingPolicy | None = None,
        config: RequesterConfig | None = None,
    ) -> None:
        self._paging = paging or PagingPolicy()
        self._config = config or RequesterConfig()
        self._loading_timer = LoadingTimer()
        self._store: StateRef | None = None

        self.pending_view_params: ViewParams | None = None
        self.pending_query_request: asyncio.Task[QueryView] | None = None
        self.pending_data_request: asyncio.Task[PagedDataView] | None = None
        # Set when the latest compile resolves; cleared when a new one starts.
        self.current_query_view: QueryView | None = None
        self.pending_offset = 0
        self.pending_limit = 0

        self._latest_ids = {COMPILE: 0, FETCH: 0}
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def loading_timer(self) -> LoadingTimer:
        return self._loading_timer

    @property
    def outstanding(self) -> int:
        """Number of issued requests that have not completed yet."""
        return len(self._tasks)

    def initialize(self, store: StateRef) -> None:
        """Subscribe to ``store`` and run one reconciliation pass.

        Must be called from inside a running event loop.
        """
        self._store = store
        store.on("change", self.on_state_change)
        self.on_state_change(store)

    def close(self) -> None:
        """Unsubscribe and abandon all outstanding requests.

        Outstanding requests keep running to completion; their results are
        discarded.
        """
        if self._store is not None:
            self._store.off("change", self.on_state_change)
            self._store = None
        self._latest_ids[COMPILE] += 1
        self._latest_ids[FETCH] += 1
        self._loading_timer.stop()

    async def join(self) -> None:
        """Wait until every issued request, including chained ones, has completed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def on_state_change(self, store: StateRef) -> None:
        """Reconcile the current state with issued requests."""
        app_state = store.get_value()
        view_state = app_state.view_state
        view_params = view_state.view_params

        if view_params is not self.pending_view_params:
            self.pending_view_params = view_params
            self.current_query_view = None
            request_id = self._next_id(COMPILE)
            # Rows fetched for the previous view definition must never land.
            self._next_id(FETCH)
            log_compile_issued(
                request_id=request_id,
                pivots=view_params.vpivots,
                open_paths=len(view_params.open_paths),
            )
            self.pending_query_request = self._spawn(
                store,
                self._compile(store, app_state, view_params, request_id),
                stage=COMPILE,
                request_id=request_id,
            )
            self._start_loading_timer(store)
            return

        # View definition unchanged: only refetch if the viewport left the
        # last issued window.
        if self.current_query_view is not None and not self._paging.contains(
            self.pending_offset,
            self.pending_limit,
            view_state.viewport_top,
            view_state.viewport_bottom,
        ):
            logger.debug(
                "Viewport outside issued window",
                extra={
                    "pending_offset": self.pending_offset,
                    "pending_limit": self.pending_limit,
                    "viewport_top": view_state.viewport_top,
                    "viewport_bottom": view_state.viewport_bottom,
                },
            )
            self.request_data(store, self.current_query_view)

    def request_data(
        self, store: StateRef, query_view: QueryView
    ) -> asyncio.Task[PagedDataView]:
        """Fetch the window around the current viewport for ``query_view``.

        Returns:
            Task resolving to the fetched PagedDataView
        """
        app_state = store.get_value()
        view_state = app_state.view_state
        offset, limit = self._paging.fetch_params(
            view_state.viewport_top, view_state.viewport_bottom
        )
        self.pending_offset = offset
        self.pending_limit = limit
        request_id = self._next_id(FETCH)
        log_fetch_issued(request_id=request_id, offset=offset, limit=limit)

        # Rows are annotated against the definition the query was compiled from.
        view_params = self.pending_view_params
        if view_params is None:
            view_params = view_state.view_params
        task = self._spawn(
            store,
            self._fetch(
                store,
                app_state.connection,
                view_params,
                query_view,
                offset,
                limit,
                request_id,
            ),
            stage=FETCH,
            request_id=request_id,
        )
        self.pending_data_request = task
        return task

    async def _compile(
        self,
        store: StateRef,
        app_state: AppState,
        view_params: ViewParams,
        request_id: int,
    ) -> QueryView:
        start = perf_counter()
        query_view = await request_query_view(
            app_state.connection,
            app_state.base_query,
            app_state.base_schema,
            view_params,
            request_id=request_id,
        )
        if not self._is_latest(COMPILE, request_id):
            return query_view

        new_state = store.update(
            lambda st: clamp_and_set_query_view(st, query_view, self._paging)
        )
        log_compile_resolved(
            request_id=request_id,
            row_count=query_view.row_count,
            viewport=new_state.view_state.viewport,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        # A change handler may have installed a new view definition during
        # the write.
        if not self._is_latest(COMPILE, request_id):
            return query_view
        # Recorded after the write above so the change notification it
        # triggers cannot issue a fetch of its own.
        self.current_query_view = query_view
        self.request_data(store, query_view)
        return query_view

    async def _fetch(
        self,
        store: StateRef,
        engine: QueryEngine,
        view_params: ViewParams,
        query_view: QueryView,
        offset: int,
        limit: int,
        request_id: int,
    ) -> PagedDataView:
        start = perf_counter()
        data_view = await request_data_view(
            engine, view_params, query_view, offset, limit, request_id=request_id
        )
        if not self._is_latest(FETCH, request_id):
            return data_view

        log_fetch_resolved(
            request_id=request_id,
            offset=offset,
            rows=data_view.item_count,
            total_row_count=data_view.total_row_count,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        self._loading_timer.stop()
        store.update(lambda st: set_data_view(st, data_view))
        return data_view

    def _start_loading_timer(self, store: StateRef) -> None:
        self._loading_timer.start(
            self._config.loading_delay_ms,
            lambda: store.update(lambda st: set_loading(st, IndicatorState.FIRING)),
        )
        state = self._loading_timer.state
        if store.get_value().view_state.loading is not state:
            store.update(lambda st: set_loading(st, state))

    def _next_id(self, stage: str) -> int:
        self._latest_ids[stage] += 1
        return self._latest_ids[stage]

    def _is_latest(self, stage: str, request_id: int) -> bool:
        latest = self._latest_ids[stage]
        if request_id != latest:
            log_request_abandoned(stage=stage, request_id=request_id, latest_id=latest)
            return False
        return True

    def _spawn(
        self,
        store: StateRef,
        coro: Coroutine[Any, Any, Any],
        *,
        stage: str,
        request_id: int,
    ) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(
            lambda t: self._on_request_done(store, t, stage=stage, request_id=request_id)
        )
        return task

    def _on_request_done(
        self,
        store: StateRef,
        task: asyncio.Task[Any],
        *,
        stage: str,
        request_id: int,
    ) -> None:
        self._tasks.discard(task)
        if task is self.pending_data_request:
            self.pending_data_request = None
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if request_id != self._latest_ids[stage]:
            # Superseded request: its failure has no visible effect.
            logger.debug(
                "Abandoned request failed",
                extra={"stage": stage, "request_id": request_id, "error": str(error)},
            )
            return

        log_request_failed(
            stage=stage,
            request_id=request_id,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        self._loading_timer.stop()
        store.update(lambda st: set_loading(st, IndicatorState.IDLE))
        store.report_error(error)
