"""Brex card accounts endpoint definition and adapter.

The card account listing returns a bare JSON array rather than a page object;
``PageAdapter`` reads it as a single final page.
"""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import CARD_ACCOUNTS_PATH
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import PageAdapter, has_string

DEFAULT_FIELDS = (
    "id",
    "status",
    "current_balance.amount",
    "current_balance.currency",
    "available_balance.amount",
    "available_balance.currency",
    "account_limit.amount",
    "account_limit.currency",
)


def build_path(params: dict[str, Any]) -> str:
    return CARD_ACCOUNTS_PATH


SPEC = RestEndpointSpec(
    id="card_accounts",
    method="GET",
    build_path=build_path,
)


class Adapter(PageAdapter):
    """Adapter for parsing the card account listing."""


DEFINITION = EntityDefinition(
    kind=EntityKind.CARD_ACCOUNT,
    items_key="accounts",
    item_key="account",
    list_spec=SPEC,
    list_adapter=Adapter(),
    default_fields=DEFAULT_FIELDS,
    is_valid=has_string("id"),
    amount_path="current_balance.amount",
    status_path="status",
)
