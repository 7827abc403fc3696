"""Brex expenses endpoint definitions and adapters.

Covers ``GET /v1/expenses`` (all expense types) and
``GET /v1/expenses/{id}``. The list endpoint filters server-side on
``updated_at`` so date windows map onto ``updated_at_start``/``updated_at_end``.
"""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import EXPENSES_PATH
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import ItemAdapter, PageAdapter, has_string, page_query, window_query

START_PARAM = "updated_at_start"
END_PARAM = "updated_at_end"

DEFAULT_FIELDS = (
    "id",
    "updated_at",
    "status",
    "payment_status",
    "expense_type",
    "purchased_at",
    "purchased_amount.amount",
    "purchased_amount.currency",
    "merchant.raw_descriptor",
    "category",
    "budget_id",
    "merchant_id",
)

# Upstream expense shapes vary by type; any string identifier is enough
is_expense = has_string("id", "merchant_id", "spending_entity_id")


def build_path(params: dict[str, Any]) -> str:
    return EXPENSES_PATH


def build_query(params: dict[str, Any]) -> dict[str, Any]:
    """Build query parameters for the expense listing."""
    q = page_query(params)
    q.update(window_query(params, start_param=START_PARAM, end_param=END_PARAM))
    if params.get("expense_type"):
        q["expense_type[]"] = list(params["expense_type"])
    if params.get("status"):
        q["status[]"] = list(params["status"])
    if params.get("payment_status"):
        q["payment_status[]"] = list(params["payment_status"])
    if params.get("expand"):
        q["expand[]"] = list(params["expand"])
    return q


def build_item_path(params: dict[str, Any]) -> str:
    return f"{EXPENSES_PATH}/{params['item_id']}"


def build_item_query(params: dict[str, Any]) -> dict[str, Any]:
    if params.get("expand"):
        return {"expand[]": list(params["expand"])}
    return {}


SPEC = RestEndpointSpec(
    id="expenses",
    method="GET",
    build_path=build_path,
    build_query=build_query,
    start_param=START_PARAM,
    end_param=END_PARAM,
)

ITEM_SPEC = RestEndpointSpec(
    id="expense",
    method="GET",
    build_path=build_item_path,
    build_query=build_item_query,
)


class Adapter(PageAdapter):
    """Adapter for parsing an expense page."""


class ItemResponseAdapter(ItemAdapter):
    """Adapter for a single expense."""


DEFINITION = EntityDefinition(
    kind=EntityKind.EXPENSE,
    items_key="expenses",
    item_key="expense",
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
