"""Paging policy: fetch windows, viewport clamping and containment.

All functions here are pure. The requester asks the policy which window to
fetch for a viewport, whether a viewport is still covered by the last
issued window, and how to clamp a viewport when a query's row count
changes.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PagingConfig:
    """Read-behind/read-ahead margins around the viewport.

    Attributes:
        offset_pad: Rows fetched above the viewport
        limit_pad: Rows fetched below the viewport
        min_limit: Lower bound for the fetch limit
    """

    offset_pad: int = 100
    limit_pad: int = 100
    min_limit: int = 0

    def __post_init__(self) -> None:
        if self.offset_pad < 0 or self.limit_pad < 0 or self.min_limit < 0:
            raise ValidationError("PagingConfig values must be non-negative")


class PagingPolicy:
    """Computes fetch windows for a viewport."""

    def __init__(self, config: PagingConfig | None = None) -> None:
        self._config = config or PagingConfig()

    @property
    def config(self) -> PagingConfig:
        return self._config

    def fetch_params(self, top: int, bottom: int) -> tuple[int, int]:
        """Window ``(offset, limit)`` covering ``[top, bottom)`` plus margins."""
        offset = max(0, top - self._config.offset_pad)
        limit = max(bottom + self._config.limit_pad - offset, self._config.min_limit)
        return offset, limit

    def clamp_viewport(self, row_count: int, top: int, bottom: int) -> tuple[int, int]:
        """Clamp ``[top, bottom)`` into ``[0, row_count)``.

        The viewport is shifted up before it is shrunk, so its span is kept
        whenever the query has enough rows.
        """
        if row_count <= 0:
            return 0, 0
        span = min(max(bottom - top, 0), row_count)
        clamped_top = min(max(top, 0), row_count - span)
        return clamped_top, clamped_top + span

    def contains(self, offset: int, limit: int, top: int, bottom: int) -> bool:
        """True iff ``[top, bottom)`` lies inside ``[offset, offset + limit)``."""
        return offset <= top and bottom <= offset + limit


_default_policy = PagingPolicy()


def fetch_params(top: int, bottom: int) -> tuple[int, int]:
    return _default_policy.fetch_params(top, bottom)


def clamp_viewport(row_count: int, top: int, bottom: int) -> tuple[int, int]:
    return _default_policy.clamp_viewport(row_count, top, bottom)


def contains(offset: int, limit: int, top: int, bottom: int) -> bool:
    return _default_policy.contains(offset, limit, top, bottom)
