"""Structured logging for the compile/fetch pipeline.

Each hook emits one log record with its context in ``extra`` so handlers
can index on request ids and windows.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_compile_issued(*, request_id: int, pivots: tuple[str, ...], open_paths: int) -> None:
    """Log a compile request for a new view definition.

    Args:
        request_id: Compile request id
        pivots: Pivot columns of the view definition
        open_paths: Number of expanded paths
    """
    logger.info(
        "compile_issued",
        extra={"request_id": request_id, "pivots": list(pivots), "open_paths": open_paths},
    )


def log_compile_resolved(
    *,
    request_id: int,
    row_count: int,
    viewport: tuple[int, int],
    latency_ms: float | None = None,
) -> None:
    """Log a resolved compile and the clamped viewport it installed."""
    logger.info(
        "compile_resolved",
        extra={
            "request_id": request_id,
            "row_count": row_count,
            "viewport_top": viewport[0],
            "viewport_bottom": viewport[1],
            "latency_ms": latency_ms,
        },
    )


def log_fetch_issued(*, request_id: int, offset: int, limit: int) -> None:
    logger.debug(
        "fetch_issued",
        extra={"request_id": request_id, "offset": offset, "limit": limit},
    )


def log_fetch_resolved(
    *,
    request_id: int,
    offset: int,
    rows: int,
    total_row_count: int,
    latency_ms: float | None = None,
) -> None:
    logger.debug(
        "fetch_resolved",
        extra={
            "request_id": request_id,
            "offset": offset,
            "rows": rows,
            "total_row_count": total_row_count,
            "latency_ms": latency_ms,
        },
    )


def log_request_abandoned(*, stage: str, request_id: int, latest_id: int) -> None:
    """Log a completion that was discarded because a newer request exists.

    Args:
        stage: "compile" or "fetch"
        request_id: Id of the completed request
        latest_id: Id of the latest issued request for the stage
    """
    logger.debug(
        "request_abandoned",
        extra={"stage": stage, "request_id": request_id, "latest_id": latest_id},
    )


def log_request_failed(
    *,
    stage: str,
    request_id: int,
    error_type: str,
    error_message: str,
) -> None:
    logger.error(
        "request_failed",
        extra={
            "stage": stage,
            "request_id": request_id,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
