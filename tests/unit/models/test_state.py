"""Unit tests for AppState transitions."""

from __future__ import annotations

from fakes import FakeQueryEngine, make_store

from tabview.pivot.core import IndicatorState
from tabview.pivot.models import (
    PagedDataView,
    QueryView,
    ViewParams,
    clamp_and_set_query_view,
    set_data_view,
    set_loading,
    set_view_params,
)
from tabview.pivot.runtime import PagingPolicy


def initial_state(top=0, bottom=20):
    return make_store(FakeQueryEngine({}), ViewParams(), top, bottom).get_value()


def test_clamp_and_set_query_view_clamps_viewport():
    state = initial_state(50, 70)
    query_view = QueryView(query="q", row_count=10)

    new_state = clamp_and_set_query_view(state, query_view, PagingPolicy())

    assert new_state.view_state.viewport == (0, 10)
    assert new_state.view_state.query_view is query_view
    assert state.view_state.viewport == (50, 70)


def test_set_data_view_clears_loading():
    state = set_loading(initial_state(), IndicatorState.FIRING)
    data_view = PagedDataView(schema=state.base_schema, total_row_count=0, offset=0)

    new_state = set_data_view(state, data_view)

    assert new_state.view_state.data_view is data_view
    assert new_state.view_state.loading is IndicatorState.IDLE


def test_set_view_params_keeps_version():
    state = initial_state()
    params = ViewParams(vpivots=("region",))

    new_state = set_view_params(state, params)

    assert new_state.view_state.view_params is params
    assert new_state.version == state.version
