"""Brex primary card transactions endpoint definition and adapter.

``GET /v2/transactions/card/primary`` only accepts ``posted_at_start``; the
end of each window is enforced client-side on ``posted_at``.
"""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import CARD_TRANSACTIONS_PATH
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import PageAdapter, has_string, page_query, window_query

START_PARAM = "posted_at_start"

DEFAULT_FIELDS = (
    "id",
    "status",
    "posted_at",
    "amount.amount",
    "amount.currency",
    "merchant.raw_descriptor",
    "card_last_four",
)


def build_path(params: dict[str, Any]) -> str:
    return CARD_TRANSACTIONS_PATH


def build_query(params: dict[str, Any]) -> dict[str, Any]:
    """Build query parameters for the card transaction listing."""
    q = page_query(params)
    q.update(window_query(params, start_param=START_PARAM, end_param=None))
    if params.get("user_ids"):
        q["user_ids[]"] = list(params["user_ids"])
    if params.get("expand"):
        q["expand[]"] = list(params["expand"])
    return q


SPEC = RestEndpointSpec(
    id="card_transactions",
    method="GET",
    build_path=build_path,
    build_query=build_query,
    start_param=START_PARAM,
)


class Adapter(PageAdapter):
    """Adapter for parsing a card transaction page."""


DEFINITION = EntityDefinition(
    kind=EntityKind.CARD_TRANSACTION,
    items_key="transactions",
    item_key="transaction",
    list_spec=SPEC,
    list_adapter=Adapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=has_string("id"),
    date_path="posted_at",
    amount_path="amount.amount",
    descriptor_path="merchant.raw_descriptor",
)
