"""Brex cash accounts endpoint definitions and adapters."""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import CASH_ACCOUNTS_PATH
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import ItemAdapter, PageAdapter, has_string, page_query

DEFAULT_FIELDS = (
    "id",
    "name",
    "status",
    "primary",
    "current_balance.amount",
    "current_balance.currency",
    "available_balance.amount",
    "available_balance.currency",
)


def build_path(params: dict[str, Any]) -> str:
    return CASH_ACCOUNTS_PATH


def build_item_path(params: dict[str, Any]) -> str:
    return f"{CASH_ACCOUNTS_PATH}/{params['item_id']}"


SPEC = RestEndpointSpec(
    id="cash_accounts",
    method="GET",
    build_path=build_path,
    build_query=page_query,
)

ITEM_SPEC = RestEndpointSpec(
    id="cash_account",
    method="GET",
    build_path=build_item_path,
)


class Adapter(PageAdapter):
    """Adapter for parsing a cash account page."""


class ItemResponseAdapter(ItemAdapter):
    """Adapter for a single cash account."""


DEFINITION = EntityDefinition(
    kind=EntityKind.CASH_ACCOUNT,
    items_key="accounts",
    item_key="account",
    list_spec=SPEC,
    list_adapter=Adapter(),
    item_spec=ITEM_SPEC,
    item_adapter=ItemResponseAdapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=has_string("id"),
    amount_path="current_balance.amount",
    status_path="status",
)
