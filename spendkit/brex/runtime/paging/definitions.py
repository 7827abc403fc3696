"""Paging metadata definitions and policy structures.

This module defines the value objects shared by the window planner and the
paginated collector: windows, page requests/responses, the collection policy
and the aggregated result.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Largest page the upstream API will serve
UPSTREAM_MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Window:
    """Half-open date range ``[start, end)`` for one group of upstream queries.

    Attributes:
        start: Inclusive lower bound (None = open)
        end: Exclusive upper bound (None = open)
        index: Zero-based index of this window in the plan
    """

    start: datetime | None = None
    end: datetime | None = None
    index: int = 0

    @property
    def is_bounded(self) -> bool:
        return self.start is not None or self.end is not None

    def describe(self) -> str:
        start = self.start.isoformat() if self.start else "none"
        end = self.end.isoformat() if self.end else "none"
        return f"{start}..{end}"


@dataclass(frozen=True)
class PageRequest:
    """One upstream page request.

    Attributes:
        limit: Items requested (1..UPSTREAM_MAX_PAGE_SIZE)
        cursor: Opaque continuation token (None for the first page)
        filters: Server-side filters forwarded to the endpoint
        window: Date bounds of the window being collected
    """

    limit: int
    cursor: str | None = None
    filters: Mapping[str, Any] = field(default_factory=dict)
    window: Window = field(default_factory=Window)

    def __post_init__(self) -> None:
        if self.limit <= 0 or self.limit > UPSTREAM_MAX_PAGE_SIZE:
            raise ValueError(
                f"PageRequest limit must be between 1 and {UPSTREAM_MAX_PAGE_SIZE}, got {self.limit}"
            )


@dataclass
class PageResponse:
    """One upstream page.

    Attributes:
        items: Raw items on this page
        next_cursor: Continuation token; None signals end of stream
    """

    items: list[Any] = field(default_factory=list)
    next_cursor: str | None = None


FetchPage = Callable[[PageRequest], Awaitable[PageResponse]]


@dataclass(frozen=True)
class CollectionPolicy:
    """Limits for one collection operation.

    Attributes:
        page_size: Items requested per upstream page
        max_items: Cap on items returned across all windows
        max_pages: Ceiling on upstream page requests (None = unlimited)
    """

    page_size: int
    max_items: int
    max_pages: int | None = None

    def __post_init__(self) -> None:
        """Validate policy configuration."""
        if self.page_size <= 0 or self.page_size > UPSTREAM_MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {UPSTREAM_MAX_PAGE_SIZE}")
        if self.max_items <= 0:
            raise ValueError("max_items must be positive")
        if self.max_pages is not None and self.max_pages <= 0:
            raise ValueError("max_pages must be positive")


@dataclass
class CollectionResult:
    """Result of a paginated collection.

    Attributes:
        items: Aggregated items from all windows (never more than max_items)
        pages_fetched: Number of upstream page requests issued
        windows_planned: Number of windows in the plan
        windows_visited: Number of windows at least partially collected
        cap_reached: Whether collection stopped because max_items was hit
        next_cursor: Outstanding cursor when collection stopped (single-window plans only)
        page_budget_exhausted: Whether collection stopped at the page ceiling
    """

    items: list[Any]
    pages_fetched: int = 0
    windows_planned: int = 0
    windows_visited: int = 0
    cap_reached: bool = False
    next_cursor: str | None = None
    page_budget_exhausted: bool = False

    @property
    def count(self) -> int:
        return len(self.items)
