"""Paginated collection across planned date windows.

This module provides the PaginatedCollector class that walks each window's
cursor stream, discards malformed items, applies client-side predicates and
aggregates survivors up to the caller's cap.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from time import perf_counter
from typing import Any

from ...core.exceptions import ValidationError
from .definitions import (
    CollectionPolicy,
    CollectionResult,
    FetchPage,
    PageRequest,
    Window,
)
from .filters import ItemFilter
from .telemetry import log_collection_complete, log_collection_error, log_page_fetched


class _Aggregation:
    """Per-call aggregation state."""

    __slots__ = ("items", "pages_fetched", "windows_visited", "cap_reached", "budget_hit")

    def __init__(self) -> None:
        self.items: list[Any] = []
        self.pages_fetched = 0
        self.windows_visited = 0
        self.cap_reached = False
        self.budget_hit = False


class PaginatedCollector:
    """Collects items from a cursor-paginated source over one or more windows.

    Windows are visited in order and collection short-circuits once the
    overall cap is reached. Any exception raised by ``fetch_page`` aborts the
    whole operation and the items gathered so far are discarded.
    """

    def __init__(
        self,
        policy: CollectionPolicy,
        *,
        is_valid: Callable[[Any], bool] | None = None,
        item_filter: ItemFilter | None = None,
        end_date_path: str | None = None,
        endpoint_id: str = "unknown",
    ) -> None:
        """Initialize the collector.

        Args:
            policy: Page size, item cap and page ceiling
            is_valid: Shape predicate; items failing it are dropped
            item_filter: Client-side predicates applied per page
            end_date_path: Item path used to enforce each window's end bound
                when the upstream endpoint cannot filter on it
            endpoint_id: Identifier used in telemetry
        """
        self._policy = policy
        self._is_valid = is_valid
        self._filter = item_filter or ItemFilter()
        self._end_date_path = end_date_path
        self._endpoint_id = endpoint_id

    async def collect(
        self,
        *,
        fetch_page: FetchPage,
        windows: list[Window],
        filters: Mapping[str, Any] | None = None,
        start_cursor: str | None = None,
    ) -> CollectionResult:
        """Collect items across all windows.

        Args:
            fetch_page: Async callable returning one upstream page
            windows: Ordered window plan
            filters: Server-side filters attached to every page request
            start_cursor: Continuation token for the first page of a single-window plan

        Returns:
            CollectionResult with at most ``policy.max_items`` items

        Raises:
            ValidationError: If ``start_cursor`` is combined with several windows
            ValueError: If no windows are provided
        """
        if not windows:
            raise ValueError("Cannot collect: no windows provided")
        if start_cursor and len(windows) > 1:
            raise ValidationError(
                "cursor cannot be combined with a multi-window date range", field="cursor"
            )

        started = perf_counter()
        state = _Aggregation()
        server_filters = dict(filters or {})
        outstanding: str | None = None

        for window in windows:
            if state.cap_reached or state.budget_hit:
                break
            outstanding = await self._collect_window(
                fetch_page=fetch_page,
                window=window,
                filters=server_filters,
                cursor=start_cursor if window.index == 0 else None,
                state=state,
            )

        result = CollectionResult(
            items=state.items,
            pages_fetched=state.pages_fetched,
            windows_planned=len(windows),
            windows_visited=state.windows_visited,
            cap_reached=state.cap_reached,
            next_cursor=outstanding if len(windows) == 1 else None,
            page_budget_exhausted=state.budget_hit,
        )
        log_collection_complete(
            endpoint_id=self._endpoint_id,
            result=result,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result

    async def _collect_window(
        self,
        *,
        fetch_page: FetchPage,
        window: Window,
        filters: dict[str, Any],
        cursor: str | None,
        state: _Aggregation,
    ) -> str | None:
        """Walk one window's cursor stream. Returns the outstanding cursor."""
        item_filter = self._filter
        if self._end_date_path and window.end is not None:
            item_filter = item_filter.with_before(self._end_date_path, window.end)

        state.windows_visited += 1
        max_items = self._policy.max_items
        max_pages = self._policy.max_pages

        while True:
            if max_pages is not None and state.pages_fetched >= max_pages:
                state.budget_hit = True
                return cursor

            remaining = max_items - len(state.items)
            request = PageRequest(
                limit=min(self._policy.page_size, remaining),
                cursor=cursor,
                filters=filters,
                window=window,
            )

            page_started = perf_counter()
            try:
                page = await fetch_page(request)
            except Exception as e:
                log_collection_error(
                    endpoint_id=self._endpoint_id,
                    window=window,
                    page_index=state.pages_fetched,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            state.pages_fetched += 1

            received = page.items if isinstance(page.items, list) else []
            if self._is_valid is not None:
                received = [item for item in received if self._is_valid(item)]
            accepted = item_filter.apply(received)

            room = max_items - len(state.items)
            state.items.extend(accepted[:room])
            cursor = page.next_cursor or None

            log_page_fetched(
                endpoint_id=self._endpoint_id,
                window=window,
                page_index=state.pages_fetched - 1,
                received=len(page.items) if isinstance(page.items, list) else 0,
                accepted=len(accepted),
                has_more=cursor is not None,
                latency_ms=(perf_counter() - page_started) * 1000.0,
            )

            if len(state.items) >= max_items:
                state.cap_reached = True
                return cursor
            if cursor is None:
                return None
