"""Brex cash account transactions endpoint definition and adapter."""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import CASH_TRANSACTIONS_PATH
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import PageAdapter, has_string, page_query, window_query

START_PARAM = "posted_at_start"

DEFAULT_FIELDS = (
    "id",
    "posted_at",
    "amount.amount",
    "amount.currency",
    "description",
)


def build_path(params: dict[str, Any]) -> str:
    """Build the cash transactions path for one account."""
    account_id = params.get("account_id")
    if not account_id:
        raise ValueError("account_id is required for cash transactions")
    return CASH_TRANSACTIONS_PATH.format(account_id=account_id)


def build_query(params: dict[str, Any]) -> dict[str, Any]:
    q = page_query(params)
    q.update(window_query(params, start_param=START_PARAM, end_param=None))
    if params.get("expand"):
        q["expand[]"] = list(params["expand"])
    return q


SPEC = RestEndpointSpec(
    id="cash_transactions",
    method="GET",
    build_path=build_path,
    build_query=build_query,
    start_param=START_PARAM,
)


class Adapter(PageAdapter):
    """Adapter for parsing a cash transaction page."""


DEFINITION = EntityDefinition(
    kind=EntityKind.CASH_TRANSACTION,
    items_key="transactions",
    item_key="transaction",
    list_spec=SPEC,
    list_adapter=Adapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=has_string("id"),
    date_path="posted_at",
    amount_path="amount.amount",
    descriptor_path="description",
)
