"""Structured logging for paging operations.

This module provides telemetry hooks for window planning and paginated
collection, emitting structured log records for observability.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .definitions import CollectionResult, Window

logger = logging.getLogger(__name__)


def log_window_plan(
    *,
    endpoint_id: str,
    total_windows: int,
    window_days: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> None:
    """Log window plan creation.

    Args:
        endpoint_id: Endpoint identifier
        total_windows: Number of windows planned
        window_days: Nominal window length in days (if windowed)
        start: Requested range start
        end: Requested range end
    """
    logger.debug(
        "window_plan_created",
        extra={
            "endpoint_id": endpoint_id,
            "total_windows": total_windows,
            "window_days": window_days,
            "start": start.isoformat() if start else None,
            "end": end.isoformat() if end else None,
        },
    )


def log_page_fetched(
    *,
    endpoint_id: str,
    window: Window,
    page_index: int,
    received: int,
    accepted: int,
    has_more: bool,
    latency_ms: float | None = None,
) -> None:
    """Log a single upstream page.

    Args:
        endpoint_id: Endpoint identifier
        window: Window the page belongs to
        page_index: Zero-based page index across the whole operation
        received: Raw items on the page
        accepted: Items kept after validation and client-side filtering
        has_more: Whether the upstream returned a continuation cursor
        latency_ms: Fetch latency in milliseconds
    """
    logger.debug(
        "page_fetched",
        extra={
            "endpoint_id": endpoint_id,
            "window": window.describe(),
            "window_index": window.index,
            "page_index": page_index,
            "received": received,
            "accepted": accepted,
            "has_more": has_more,
            "latency_ms": latency_ms,
        },
    )


def log_collection_complete(
    *,
    endpoint_id: str,
    result: CollectionResult,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of a collection operation."""
    logger.info(
        "collection_complete",
        extra={
            "endpoint_id": endpoint_id,
            "count": result.count,
            "pages_fetched": result.pages_fetched,
            "windows_planned": result.windows_planned,
            "windows_visited": result.windows_visited,
            "cap_reached": result.cap_reached,
            "page_budget_exhausted": result.page_budget_exhausted,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_collection_error(
    *,
    endpoint_id: str,
    window: Window,
    page_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log an upstream failure that aborted a collection.

    Args:
        endpoint_id: Endpoint identifier
        window: Window being collected when the error happened
        page_index: Zero-based index of the failing page
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "collection_error",
        extra={
            "endpoint_id": endpoint_id,
            "window": window.describe(),
            "page_index": page_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
