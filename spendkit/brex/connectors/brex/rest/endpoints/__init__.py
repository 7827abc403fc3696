"""Brex REST endpoint registry.

This module collects every endpoint specification and adapter from the
per-resource modules and builds the Brex entity definitions.
"""

from __future__ import annotations

from spendkit.brex.runtime.entity_registry import EntityDefinition, EntityRegistry
from spendkit.brex.runtime.rest import ResponseAdapter, RestEndpointSpec

from . import (
    budgets,
    card_accounts,
    card_expenses,
    card_transactions,
    cash_accounts,
    cash_transactions,
    expenses,
    statements,
)

# Registry mapping endpoint IDs to specs and adapters
_ENDPOINT_REGISTRY: dict[str, tuple[RestEndpointSpec, type[ResponseAdapter]]] = {
    "expenses": (expenses.SPEC, expenses.Adapter),
    "expense": (expenses.ITEM_SPEC, expenses.ItemResponseAdapter),
    "card_expenses": (card_expenses.SPEC, card_expenses.Adapter),
    "card_expense": (card_expenses.ITEM_SPEC, card_expenses.ItemResponseAdapter),
    "update_card_expense": (card_expenses.UPDATE_SPEC, card_expenses.ItemResponseAdapter),
    "card_transactions": (card_transactions.SPEC, card_transactions.Adapter),
    "cash_transactions": (cash_transactions.SPEC, cash_transactions.Adapter),
    "cash_accounts": (cash_accounts.SPEC, cash_accounts.Adapter),
    "cash_account": (cash_accounts.ITEM_SPEC, cash_accounts.ItemResponseAdapter),
    "card_accounts": (card_accounts.SPEC, card_accounts.Adapter),
    "cash_statements": (statements.CASH_SPEC, statements.Adapter),
    "card_statements": (statements.CARD_SPEC, statements.Adapter),
    "budgets": (budgets.BUDGETS_SPEC, budgets.Adapter),
    "budget": (budgets.BUDGET_SPEC, budgets.ItemResponseAdapter),
    "spend_limits": (budgets.SPEND_LIMITS_SPEC, budgets.Adapter),
    "spend_limit": (budgets.SPEND_LIMIT_SPEC, budgets.ItemResponseAdapter),
    "budget_programs": (budgets.BUDGET_PROGRAMS_SPEC, budgets.Adapter),
    "budget_program": (budgets.BUDGET_PROGRAM_SPEC, budgets.ItemResponseAdapter),
}

_DEFINITIONS: tuple[EntityDefinition, ...] = (
    expenses.DEFINITION,
    card_expenses.DEFINITION,
    card_transactions.DEFINITION,
    cash_transactions.DEFINITION,
    cash_accounts.DEFINITION,
    card_accounts.DEFINITION,
    statements.CASH_DEFINITION,
    statements.CARD_DEFINITION,
    budgets.BUDGET_DEFINITION,
    budgets.SPEND_LIMIT_DEFINITION,
    budgets.BUDGET_PROGRAM_DEFINITION,
)


def get_endpoint_spec(endpoint_id: str) -> RestEndpointSpec | None:
    """Get endpoint specification by ID.

    Args:
        endpoint_id: Endpoint identifier (e.g., "expenses", "budget")

    Returns:
        RestEndpointSpec if found, None otherwise
    """
    entry = _ENDPOINT_REGISTRY.get(endpoint_id)
    return entry[0] if entry else None


def get_endpoint_adapter(endpoint_id: str) -> type[ResponseAdapter] | None:
    """Get endpoint adapter class by ID.

    Args:
        endpoint_id: Endpoint identifier (e.g., "expenses", "budget")

    Returns:
        Adapter class if found, None otherwise
    """
    entry = _ENDPOINT_REGISTRY.get(endpoint_id)
    return entry[1] if entry else None


def list_endpoints() -> list[str]:
    """List all available endpoint IDs."""
    return list(_ENDPOINT_REGISTRY.keys())


def build_entity_registry() -> EntityRegistry:
    """Build a fresh registry holding every Brex entity definition."""
    return EntityRegistry(list(_DEFINITIONS))


__all__ = [
    "get_endpoint_spec",
    "get_endpoint_adapter",
    "list_endpoints",
    "build_entity_registry",
]
