"""Shared application state and its pure transitions.

Architecture:
    State is an explicit, strongly typed snapshot. Nothing mutates a
    snapshot in place: each transition below takes a snapshot and returns a
    new one, and the store (``runtime.store.StateRef``) stamps every accepted
    snapshot with a monotonically increasing ``version``.

Design Decisions:
    - Frozen dataclasses: cheap copies via ``dataclasses.replace`` and the
      ``view_params`` reference is carried over untouched, so identity
      comparison of view definitions keeps working across transitions
    - Transitions never touch ``version``: only the store assigns stamps
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from ..core.enums import IndicatorState
from ..core.exceptions import ValidationError
from .data_view import PagedDataView
from .query_view import QueryView
from .schema import Schema
from .view_params import ViewParams

if TYPE_CHECKING:
    from ..runtime.paging import PagingPolicy
    from ..runtime.query_engine import QueryEngine


@dataclass(frozen=True)
class ViewState:
    """State of the tabular view."""

    view_params: ViewParams
    viewport_top: int = 0
    viewport_bottom: int = 0
    query_view: QueryView | None = None
    data_view: PagedDataView | None = None
    loading: IndicatorState = IndicatorState.IDLE

    @property
    def viewport(self) -> tuple[int, int]:
        return self.viewport_top, self.viewport_bottom


@dataclass(frozen=True)
class AppState:
    """Top level application state.

    Attributes:
        connection: Query engine used for compile and fetch requests
        base_query: Query the view is built on (opaque here)
        base_schema: Schema of ``base_query``
        view_state: Current view state
        version: Stamp assigned by the store on every accepted write
        error: Last error reported through the store's error channel
    """

    connection: QueryEngine
    base_query: Any
    base_schema: Schema
    view_state: ViewState
    version: int = 0
    error: BaseException | None = None


def _with_view_state(state: AppState, **changes: Any) -> AppState:
    return replace(state, view_state=replace(state.view_state, **changes))


def set_view_params(state: AppState, view_params: ViewParams) -> AppState:
    return _with_view_state(state, view_params=view_params)


def set_viewport(state: AppState, top: int, bottom: int) -> AppState:
    if top < 0 or bottom < top:
        raise ValidationError(f"invalid viewport [{top}, {bottom})")
    return _with_view_state(state, viewport_top=top, viewport_bottom=bottom)


def clamp_and_set_query_view(
    state: AppState, query_view: QueryView, paging: PagingPolicy
) -> AppState:
    """Install a resolved query view, clamping the viewport into its row range.

    The row count may have changed since the last data request, so the
    viewport is re-clamped on every resolution.
    """
    vs = state.view_state
    top, bottom = paging.clamp_viewport(query_view.row_count, vs.viewport_top, vs.viewport_bottom)
    return _with_view_state(
        state, viewport_top=top, viewport_bottom=bottom, query_view=query_view
    )


def set_data_view(state: AppState, data_view: PagedDataView) -> AppState:
    """Install a fetched window and hide the loading indicator."""
    return _with_view_state(state, data_view=data_view, loading=IndicatorState.IDLE)


def set_loading(state: AppState, loading: IndicatorState) -> AppState:
    return _with_view_state(state, loading=loading)


def set_error(state: AppState, error: BaseException | None) -> AppState:
    return replace(state, error=error)
