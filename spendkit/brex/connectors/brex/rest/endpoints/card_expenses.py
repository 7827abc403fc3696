"""Brex card expenses endpoint definitions and adapters.

Covers ``GET /v1/expenses/card``, ``GET /v1/expenses/card/{id}`` and the
``PUT /v1/expenses/card/{id}`` update. Listings always expand ``merchant`` so
merchant-name filtering has a descriptor to match against.
"""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import (
    CARD_EXPENSE_REQUIRED_EXPAND,
    CARD_EXPENSES_PATH,
)
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import ItemAdapter, PageAdapter, merge_expand, page_query, window_query
from .expenses import DEFAULT_FIELDS, END_PARAM, START_PARAM, is_expense


def build_path(params: dict[str, Any]) -> str:
    return CARD_EXPENSES_PATH


def build_query(params: dict[str, Any]) -> dict[str, Any]:
    """Build query parameters for the card expense listing."""
    q = page_query(params)
    q.update(window_query(params, start_param=START_PARAM, end_param=END_PARAM))
    if params.get("status"):
        q["status[]"] = list(params["status"])
    if params.get("payment_status"):
        q["payment_status[]"] = list(params["payment_status"])
    q["expand[]"] = merge_expand(params.get("expand"), CARD_EXPENSE_REQUIRED_EXPAND)
    return q


def build_item_path(params: dict[str, Any]) -> str:
    return f"{CARD_EXPENSES_PATH}/{params['item_id']}"


def build_item_query(params: dict[str, Any]) -> dict[str, Any]:
    if params.get("expand"):
        return {"expand[]": list(params["expand"])}
    return {}


def build_update_body(params: dict[str, Any]) -> dict[str, Any]:
    return dict(params.get("body") or {})


SPEC = RestEndpointSpec(
    id="card_expenses",
    method="GET",
    build_path=build_path,
    build_query=build_query,
    start_param=START_PARAM,
    end_param=END_PARAM,
)

ITEM_SPEC = RestEndpointSpec(
    id="card_expense",
    method="GET",
    build_path=build_item_path,
    build_query=build_item_query,
)

UPDATE_SPEC = RestEndpointSpec(
    id="update_card_expense",
    method="PUT",
    build_path=build_item_path,
    build_body=build_update_body,
)


class Adapter(PageAdapter):
    """Adapter for parsing a card expense page."""


class ItemResponseAdapter(ItemAdapter):
    """Adapter for a single card expense (also used for update responses)."""


DEFINITION = EntityDefinition(
    kind=EntityKind.CARD_EXPENSE,
    items_key="card_expenses",
    item_key="card_expense",
    list_spec=SPEC,
    list_adapter=Adapter(),
    item_spec=ITEM_SPEC,
    item_adapter=ItemResponseAdapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=is_expense,
    date_path="updated_at",
    amount_path="purchased_amount.amount",
    descriptor_path="merchant.raw_descriptor",
)
