"""Brex budgets, spend limits and budget programs endpoint definitions.

Budgets and spend limits live under ``/v2``; budget programs under ``/v1``.
None of these endpoints filter by date, so date ranges are rejected for them.
"""

from __future__ import annotations

from typing import Any

from spendkit.brex.connectors.brex.config import (
    BUDGET_PROGRAMS_PATH,
    BUDGETS_PATH,
    SPEND_LIMITS_PATH,
)
from spendkit.brex.core import EntityKind
from spendkit.brex.runtime.entity_registry import EntityDefinition
from spendkit.brex.runtime.rest import RestEndpointSpec

from .common import ItemAdapter, PageAdapter, has_string, page_query

BUDGET_FIELDS = (
    "budget_id",
    "name",
    "spend_budget_status",
    "amount.amount",
    "amount.currency",
    "period_recurrence_type",
    "updated_at",
)

SPEND_LIMIT_FIELDS = (
    "id",
    "name",
    "status",
    "amount.amount",
    "amount.currency",
    "period_recurrence_type",
    "updated_at",
)

BUDGET_PROGRAM_FIELDS = (
    "id",
    "name",
    "budget_program_status",
    "description",
    "updated_at",
)


def _copy_keys(params: dict[str, Any], *keys: str) -> dict[str, Any]:
    q = page_query(params)
    for key in keys:
        if params.get(key):
            q[key] = params[key]
    return q


def build_budgets_query(params: dict[str, Any]) -> dict[str, Any]:
    return _copy_keys(params, "parent_budget_id", "spend_budget_status")


def build_spend_limits_query(params: dict[str, Any]) -> dict[str, Any]:
    return _copy_keys(params, "parent_budget_id", "status", "member_user_id")


def build_budget_programs_query(params: dict[str, Any]) -> dict[str, Any]:
    return _copy_keys(params, "budget_program_status")


def _item_path(base: str):
    def build(params: dict[str, Any]) -> str:
        return f"{base}/{params['item_id']}"

    return build


BUDGETS_SPEC = RestEndpointSpec(
    id="budgets",
    method="GET",
    build_path=lambda params: BUDGETS_PATH,
    build_query=build_budgets_query,
)
BUDGET_SPEC = RestEndpointSpec(id="budget", method="GET", build_path=_item_path(BUDGETS_PATH))

SPEND_LIMITS_SPEC = RestEndpointSpec(
    id="spend_limits",
    method="GET",
    build_path=lambda params: SPEND_LIMITS_PATH,
    build_query=build_spend_limits_query,
)
SPEND_LIMIT_SPEC = RestEndpointSpec(
    id="spend_limit", method="GET", build_path=_item_path(SPEND_LIMITS_PATH)
)

BUDGET_PROGRAMS_SPEC = RestEndpointSpec(
    id="budget_programs",
    method="GET",
    build_path=lambda params: BUDGET_PROGRAMS_PATH,
    build_query=build_budget_programs_query,
)
BUDGET_PROGRAM_SPEC = RestEndpointSpec(
    id="budget_program", method="GET", build_path=_item_path(BUDGET_PROGRAMS_PATH)
)


class Adapter(PageAdapter):
    """Adapter for parsing budget, spend limit and budget program pages."""


class ItemResponseAdapter(ItemAdapter):
    """Adapter for a single budget, spend limit or budget program."""


BUDGET_DEFINITION = EntityDefinition(
    kind=EntityKind.BUDGET,
    items_key="budgets",
    item_key="budget",
    list_spec=BUDGETS_SPEC,
    list_adapter=Adapter(),
    item_spec=BUDGET_SPEC,
    item_adapter=ItemResponseAdapter(),
    default_fields=BUDGET_FIELDS,
    is_valid=has_string("budget_id", "id"),
    amount_path="amount.amount",
)

SPEND_LIMIT_DEFINITION = EntityDefinition(
    kind=EntityKind.SPEND_LIMIT,
    items_key="spend_limits",
    item_key="spend_limit",
    list_spec=SPEND_LIMITS_SPEC,
    list_adapter=Adapter(),
    item_spec=SPEND_LIMIT_SPEC,
    item_adapter=ItemResponseAdapter(),
    default_fields=SPEND_LIMIT_FIELDS,
    is_valid=has_string("id"),
    amount_path="amount.amount",
)

BUDGET_PROGRAM_DEFINITION = EntityDefinition(
    kind=EntityKind.BUDGET_PROGRAM,
    items_key="budget_programs",
    item_key="budget_program",
    list_spec=BUDGET_PROGRAMS_SPEC,
    list_adapter=Adapter(),
    item_spec=BUDGET_PROGRAM_SPEC,
    item_adapter=ItemResponseAdapter(),
    default_fields=BUDGET_PROGRAM_FIELDS,
    is_valid=has_string("id"),
)
