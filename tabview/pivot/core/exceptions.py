"""Custom exception hierarchy."""

from __future__ import annotations


class PivotError(Exception):
    """Base exception for all library errors."""

    pass


class QueryEngineError(PivotError):
    """Error from the upstream query engine."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class CompileError(QueryEngineError):
    """Query engine could not compile a view definition into a query."""

    def __init__(
        self,
        message: str,
        request_id: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.request_id = request_id


class FetchError(QueryEngineError):
    """Query engine could not evaluate rows for a window.

    Carries the window that was requested so callers can tell which
    fetch failed when several are outstanding.
    """

    def __init__(
        self,
        message: str,
        request_id: int | None = None,
        offset: int | None = None,
        limit: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.request_id = request_id
        self.offset = offset
        self.limit = limit


class SchemaError(PivotError):
    """Invalid schema operation (unknown or duplicate column)."""

    pass


class StaleWriteError(PivotError):
    """A state snapshot was written that was not derived from the current one."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Stale state write: based on version {actual_version}, "
            f"current version is {expected_version}"
        )
        self.expected_version = expected_version
        self.actual_version = actual_version


class ValidationError(PivotError):
    """Data validation failure."""

    pass
