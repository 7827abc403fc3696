"""Ergonomic BrexAPI facade and operation wiring.

The BrexAPI owns one connector, one collection engine and one operation
registry, and exposes ``call(name, arguments)`` as the single entry point a
consumer such as the MCP server needs.

Architecture:
    This module implements the Facade pattern over the runtime layer:
    - build_operation_registry(): Registers every named operation with its
      request model and a handler that calls the engine or connector
    - BrexAPI: Builds the registry from settings and manages connector
      lifecycle

Design Decisions:
    - Operations are declared as data (name, entity kind, request model) and
      turned into handlers in one loop; adding an entity needs one table row
    - Connector injection allows testing with in-memory page sources
    - Context manager pattern ensures the aiohttp session is closed

See Also:
    - OperationRegistry: Dispatch and validation
    - CollectionEngine: The generic read pipeline
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from ..connectors.brex import BrexRESTConnector
from ..core.enums import EntityKind
from ..core.exceptions import UpstreamError
from ..core.settings import BrexSettings, load_settings
from ..models.requests import (
    AccountItemRequest,
    AccountListRequest,
    BudgetItemRequest,
    BudgetListRequest,
    BudgetProgramItemRequest,
    BudgetProgramListRequest,
    CardExpenseListRequest,
    CardTransactionListRequest,
    CashStatementListRequest,
    CashTransactionListRequest,
    ExpenseItemRequest,
    ExpenseListRequest,
    ItemRequest,
    ListRequest,
    SpendLimitItemRequest,
    SpendLimitListRequest,
    StatementListRequest,
    UpdateExpenseRequest,
)
from ..runtime.engine import CollectionEngine
from ..runtime.operations import Handler, OperationRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadOperation:
    """Declarative row for a list or single-object read."""

    name: str
    kind: EntityKind
    request_model: type[BaseModel]
    description: str
    single_page: bool = False


LIST_OPERATIONS: tuple[ReadOperation, ...] = (
    ReadOperation(
        "get_all_expenses",
        EntityKind.EXPENSE,
        ExpenseListRequest,
        "List expenses across pages and optional date windows, with amount and merchant filters.",
    ),
    ReadOperation(
        "get_expenses",
        EntityKind.EXPENSE,
        ExpenseListRequest,
        "List one page of expenses.",
        single_page=True,
    ),
    ReadOperation(
        "get_all_card_expenses",
        EntityKind.CARD_EXPENSE,
        CardExpenseListRequest,
        "List card expenses across pages and optional date windows.",
    ),
    ReadOperation(
        "get_card_transactions",
        EntityKind.CARD_TRANSACTION,
        CardTransactionListRequest,
        "List settled transactions for the primary card account.",
    ),
    ReadOperation(
        "get_cash_transactions",
        EntityKind.CASH_TRANSACTION,
        CashTransactionListRequest,
        "List transactions for one cash account.",
    ),
    ReadOperation(
        "get_all_accounts",
        EntityKind.CASH_ACCOUNT,
        AccountListRequest,
        "List cash accounts, optionally filtered by status.",
    ),
    ReadOperation(
        "get_card_accounts",
        EntityKind.CARD_ACCOUNT,
        AccountListRequest,
        "List card accounts, optionally filtered by status.",
    ),
    ReadOperation(
        "get_card_statements_primary",
        EntityKind.CARD_STATEMENT,
        StatementListRequest,
        "List finalized statements for the primary card account.",
    ),
    ReadOperation(
        "get_cash_account_statements",
        EntityKind.CASH_STATEMENT,
        CashStatementListRequest,
        "List finalized statements for one cash account.",
    ),
    ReadOperation(
        "get_budgets",
        EntityKind.BUDGET,
        BudgetListRequest,
        "List budgets.",
    ),
    ReadOperation(
        "get_spend_limits",
        EntityKind.SPEND_LIMIT,
        SpendLimitListRequest,
        "List spend limits.",
    ),
    ReadOperation(
        "get_budget_programs",
        EntityKind.BUDGET_PROGRAM,
        BudgetProgramListRequest,
        "List budget programs.",
    ),
)

ITEM_OPERATIONS: tuple[ReadOperation, ...] = (
    ReadOperation("get_expense", EntityKind.EXPENSE, ExpenseItemRequest, "Get one expense."),
    ReadOperation(
        "get_card_expense", EntityKind.CARD_EXPENSE, ExpenseItemRequest, "Get one card expense."
    ),
    ReadOperation(
        "get_account_details", EntityKind.CASH_ACCOUNT, AccountItemRequest, "Get one cash account."
    ),
    ReadOperation("get_budget", EntityKind.BUDGET, BudgetItemRequest, "Get one budget."),
    ReadOperation(
        "get_spend_limit", EntityKind.SPEND_LIMIT, SpendLimitItemRequest, "Get one spend limit."
    ),
    ReadOperation(
        "get_budget_program",
        EntityKind.BUDGET_PROGRAM,
        BudgetProgramItemRequest,
        "Get one budget program.",
    ),
)


def _list_handler(engine: CollectionEngine, op: ReadOperation) -> Handler:
    async def handle(request: ListRequest) -> dict[str, Any]:
        return await engine.list(op.kind, request, single_page=op.single_page)

    return handle


def _item_handler(engine: CollectionEngine, op: ReadOperation) -> Handler:
    async def handle(request: ItemRequest) -> dict[str, Any]:
        return await engine.get(op.kind, request)

    return handle


def _update_expense_handler(connector: BrexRESTConnector) -> Handler:
    async def handle(request: UpdateExpenseRequest) -> dict[str, Any]:
        body = request.body()
        updated = await connector.update_card_expense(request.expense_id, body)
        if not isinstance(updated, Mapping) or not updated.get("id"):
            raise UpstreamError("Invalid response from expense update request")
        logger.info(
            "expense_updated",
            extra={"expense_id": updated["id"], "updated_fields": sorted(body)},
        )
        return {
            "status": "success",
            "expense_id": updated["id"],
            "updated_at": updated.get("updated_at"),
            "expense_status": updated.get("status"),
            "updated_fields": sorted(body),
            "message": f"Expense {updated['id']} was updated successfully.",
        }

    return handle


def build_engine(connector: BrexRESTConnector, settings: BrexSettings) -> CollectionEngine:
    """Engine bound to ``connector`` with limits taken from ``settings``."""
    return CollectionEngine(
        connector,
        connector.entities,
        hard_limit=settings.hard_token_limit,
        default_page_size=settings.default_page_size,
        default_max_items=settings.default_max_items,
        max_pages=settings.max_pages,
    )


def build_operation_registry(
    connector: BrexRESTConnector,
    settings: BrexSettings,
) -> OperationRegistry:
    """Construct a registry holding every Brex operation.

    Args:
        connector: Page source and write client
        settings: Engine limits

    Returns:
        A new OperationRegistry; each call returns an independent instance
    """
    engine = build_engine(connector, settings)
    registry = OperationRegistry()
    for op in LIST_OPERATIONS:
        registry.register(
            op.name, op.request_model, _list_handler(engine, op), description=op.description
        )
    for op in ITEM_OPERATIONS:
        registry.register(
            op.name, op.request_model, _item_handler(engine, op), description=op.description
        )
    registry.register(
        "update_expense",
        UpdateExpenseRequest,
        _update_expense_handler(connector),
        description="Update memo, category, budget or custom fields on a card expense.",
    )
    return registry


class BrexAPI:
    """High-level facade over the Brex operations.

    Example:
        >>> async with BrexAPI() as api:
        ...     result = await api.call(
        ...         "get_all_expenses",
        ...         {"start_date": "2025-08-01", "end_date": "2025-08-15", "window_days": 7},
        ...     )
    """

    def __init__(
        self,
        *,
        settings: BrexSettings | None = None,
        connector: BrexRESTConnector | None = None,
    ) -> None:
        """Initialize the BrexAPI.

        Args:
            settings: Settings (loaded from the environment if omitted)
            connector: Optional connector instance (built from settings if omitted)
        """
        self._settings = settings or load_settings()
        self._owns_connector = connector is None
        if connector is None:
            api_key = self._settings.api_key.get_secret_value() if self._settings.api_key else None
            connector = BrexRESTConnector(
                api_key,
                base_url=self._settings.api_url,
                timeout=self._settings.timeout_seconds,
            )
        self._connector = connector
        self._operations = build_operation_registry(connector, self._settings)

    @property
    def settings(self) -> BrexSettings:
        return self._settings

    @property
    def operations(self) -> OperationRegistry:
        return self._operations

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Validate ``arguments`` and run the named operation."""
        return await self._operations.dispatch(name, arguments)

    async def close(self) -> None:
        if self._owns_connector:
            await self._connector.close()

    async def __aenter__(self) -> BrexAPI:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
