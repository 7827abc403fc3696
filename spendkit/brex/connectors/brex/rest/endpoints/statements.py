"""Brex statement endpoint definitions and adapters.

Cash statements are listed per account
(``/v2/accounts/cash/{account_id}/statements``); card statements only for the
primary card account (``/v2/accounts/card/primary/statements``).
"""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import CARD_STATEMENTS_PATH, CASH_STATEMENTS_PATH
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import PageAdapter, has_string, page_query

DEFAULT_FIELDS = (
    "id",
    "period_start",
    "period_end",
    "opening_balance.amount",
    "opening_balance.currency",
    "closing_balance.amount",
    "closing_balance.currency",
)


def build_cash_path(params: dict[str, Any]) -> str:
    account_id = params.get("account_id")
    if not account_id:
        raise ValueError("account_id is required for cash account statements")
    return CASH_STATEMENTS_PATH.format(account_id=account_id)


def build_card_path(params: dict[str, Any]) -> str:
    return CARD_STATEMENTS_PATH


CASH_SPEC = RestEndpointSpec(
    id="cash_statements",
    method="GET",
    build_path=build_cash_path,
    build_query=page_query,
)

CARD_SPEC = RestEndpointSpec(
    id="card_statements",
    method="GET",
    build_path=build_card_path,
    build_query=page_query,
)


class Adapter(PageAdapter):
    """Adapter for parsing a statement page."""


CASH_DEFINITION = EntityDefinition(
    kind=EntityKind.CASH_STATEMENT,
    items_key="statements",
    item_key="statement",
    list_spec=CASH_SPEC,
    list_adapter=Adapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=has_string("id"),
    amount_path="closing_balance.amount",
)

CARD_DEFINITION = EntityDefinition(
    kind=EntityKind.CARD_STATEMENT,
    items_key="statements",
    item_key="statement",
    list_spec=CARD_SPEC,
    list_adapter=Adapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=has_string("id"),
    amount_path="closing_balance.amount",
)
