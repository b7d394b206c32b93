"""Unit tests for the versioned StateRef."""

from __future__ import annotations

import logging

import pytest

from fakes import FakeQueryEngine, make_store

from tabview.pivot.core import IndicatorState, StaleWriteError, ValidationError
from tabview.pivot.models import ViewParams, set_loading, set_viewport


@pytest.fixture
def store():
    return make_store(FakeQueryEngine({}), ViewParams())


class TestWrites:
    """Test snapshot writes and version stamping."""

    def test_set_value_stamps_version(self, store):
        """Test each accepted write bumps the version by one."""
        assert store.version == 0
        store.set_value(set_viewport(store.get_value(), 5, 10))
        assert store.version == 1
        assert store.get_value().view_state.viewport == (5, 10)

    def test_stale_write_rejected(self, store):
        """Test a snapshot derived from an older version is rejected."""
        old = store.get_value()
        store.update(lambda st: set_viewport(st, 1, 2))

        with pytest.raises(StaleWriteError) as exc_info:
            store.set_value(set_viewport(old, 3, 4))

        assert exc_info.value.expected_version == 1
        assert exc_info.value.actual_version == 0
        assert store.get_value().view_state.viewport == (1, 2)

    def test_transitions_keep_view_params_identity(self, store):
        """Test unrelated transitions carry the same ViewParams object."""
        params = store.get_value().view_state.view_params
        store.update(lambda st: set_loading(st, IndicatorState.SCHEDULED))
        assert store.get_value().view_state.view_params is params

    def test_invalid_viewport_rejected(self, store):
        with pytest.raises(ValidationError, match="invalid viewport"):
            store.update(lambda st: set_viewport(st, 10, 5))


class TestNotifications:
    """Test change and error handlers."""

    def test_change_handlers_called_in_order(self, store):
        calls: list[str] = []
        store.on("change", lambda ref: calls.append("a"))
        store.on("change", lambda ref: calls.append("b"))

        store.update(lambda st: st)

        assert calls == ["a", "b"]

    def test_off_removes_handler(self, store):
        calls: list[int] = []

        def handler(ref):
            calls.append(ref.version)

        store.on("change", handler)
        store.update(lambda st: st)
        store.off("change", handler)
        store.update(lambda st: st)

        assert calls == [1]

    def test_reentrant_write_from_handler(self, store):
        """Test a handler may write; nested notification completes first."""
        seen: list[int] = []

        def handler(ref):
            seen.append(ref.version)
            if ref.version == 1:
                ref.update(lambda st: set_viewport(st, 2, 4))

        store.on("change", handler)
        store.update(lambda st: st)

        assert seen == [1, 2]
        assert store.version == 2

    def test_unknown_event_rejected(self, store):
        with pytest.raises(ValueError, match="Unknown event"):
            store.on("changed", lambda ref: None)

    def test_report_error_calls_handlers(self, store):
        errors: list[BaseException] = []
        store.on("error", errors.append)
        error = RuntimeError("boom")

        store.report_error(error)

        assert errors == [error]
        assert store.get_value().error is error

    def test_report_error_without_handler_logs(self, store, caplog):
        with caplog.at_level(logging.ERROR, logger="tabview.pivot.runtime.store"):
            store.report_error(RuntimeError("boom"))

        assert "Unhandled pipeline error" in caplog.text
