"""Helpers shared by every Brex list and lookup endpoint.

Brex list endpoints return ``{"items": [...], "next_cursor": "..."}``; some
older endpoints spell the cursor ``nextCursor`` and the card account listing
returns a bare array.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from spendkit.brex.connectors.brex.config import MAX_PAGE_SIZE
from spendkit.brex.core.exceptions import UpstreamError
from spendkit.brex.runtime.paging import PageResponse
from spendkit.brex.runtime.rest import ResponseAdapter

logger = logging.getLogger(__name__)


def extract_cursor(body: dict[str, Any]) -> str | None:
    """Continuation cursor from a page body; empty values end the stream."""
    for key in ("next_cursor", "nextCursor"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def page_query(params: dict[str, Any]) -> dict[str, Any]:
    """Cursor and limit query parameters common to all list endpoints."""
    q: dict[str, Any] = {}
    if params.get("limit") is not None:
        q["limit"] = max(1, min(int(params["limit"]), MAX_PAGE_SIZE))
    if params.get("cursor"):
        q["cursor"] = params["cursor"]
    return q


def window_query(
    params: dict[str, Any],
    *,
    start_param: str | None,
    end_param: str | None,
) -> dict[str, Any]:
    """Window bounds mapped onto the endpoint's date parameters."""
    q: dict[str, Any] = {}
    if start_param and params.get("window_start") is not None:
        q[start_param] = params["window_start"]
    if end_param and params.get("window_end") is not None:
        q[end_param] = params["window_end"]
    return q


def has_string(*keys: str) -> Callable[[Any], bool]:
    """Shape predicate: an object with a string value at any of ``keys``."""

    def predicate(item: Any) -> bool:
        return isinstance(item, dict) and any(isinstance(item.get(k), str) for k in keys)

    return predicate


def merge_expand(requested: Iterable[str] | None, required: Iterable[str]) -> list[str]:
    """Caller expansions plus any that must always be present."""
    out = [e for e in (requested or []) if e]
    for name in required:
        if name not in out:
            out.append(name)
    return out


class PageAdapter(ResponseAdapter):
    """Adapter for parsing one Brex list page into a PageResponse."""

    def parse(self, response: Any, params: dict[str, Any]) -> PageResponse:
        """Parse a list response.

        Args:
            response: Decoded JSON body
            params: Request parameters (used for log context)

        Returns:
            PageResponse; malformed ``items`` degrade to an empty page

        Raises:
            UpstreamError: If the body is neither an object nor an array
        """
        if isinstance(response, list):
            return PageResponse(items=response, next_cursor=None)
        if not isinstance(response, dict):
            raise UpstreamError(
                f"Invalid page format: expected an object, got {type(response).__name__}"
            )

        items = response.get("items")
        if not isinstance(items, list):
            logger.warning(
                "malformed_page_items",
                extra={
                    "endpoint_id": params.get("endpoint_id"),
                    "items_type": type(items).__name__,
                },
            )
            items = []
        return PageResponse(items=items, next_cursor=extract_cursor(response))


class ItemAdapter(ResponseAdapter):
    """Adapter for single-object endpoints."""

    def parse(self, response: Any, params: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(response, dict):
            raise UpstreamError(
                f"Invalid object format: expected an object, got {type(response).__name__}"
            )
        return response
