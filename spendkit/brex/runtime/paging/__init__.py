"""Windowed pagination layer.

This module provides reusable paging logic for any cursor-paginated entity:
date-range windowing, cursor walking, client-side filtering and a hard cap on
aggregated items.

Architecture:
    The paging layer consists of:
    - definitions.py: Value objects (Window, PageRequest, CollectionPolicy, CollectionResult)
    - planners.py: Window planning (splits date ranges)
    - filters.py: Client-side predicates the upstream cannot apply
    - executors.py: Cursor walking and aggregation
    - telemetry.py: Structured logging

Usage:
    Plan windows with WindowPlanner, then hand them to a PaginatedCollector
    together with an async ``fetch_page`` callable.
"""

from __future__ import annotations

from .definitions import (
    UPSTREAM_MAX_PAGE_SIZE,
    CollectionPolicy,
    CollectionResult,
    FetchPage,
    PageRequest,
    PageResponse,
    Window,
)
from .executors import PaginatedCollector
from .filters import BeforePredicate, ItemFilter, TextPredicate, ThresholdPredicate
from .planners import WindowPlanner

__all__ = [
    "UPSTREAM_MAX_PAGE_SIZE",
    "Window",
    "PageRequest",
    "PageResponse",
    "FetchPage",
    "CollectionPolicy",
    "CollectionResult",
    "WindowPlanner",
    "PaginatedCollector",
    "ItemFilter",
    "TextPredicate",
    "ThresholdPredicate",
    "BeforePredicate",
]
