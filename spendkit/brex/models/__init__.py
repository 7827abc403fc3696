"""Request models for Brex operations.

Architecture:
    Pydantic v2 models, frozen and validated once at the operation boundary.
    Engine value objects (windows, page requests, results) stay as frozen
    dataclasses in ``runtime.paging``.
"""

from .requests import (
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
    CustomFieldValue,
    ExpenseItemRequest,
    ExpenseListRequest,
    ItemRequest,
    ListRequest,
    ShapingArgs,
    SpendLimitItemRequest,
    SpendLimitListRequest,
    StatementListRequest,
    UpdateExpenseRequest,
)

__all__ = [
    "ShapingArgs",
    "ListRequest",
    "ExpenseListRequest",
    "CardExpenseListRequest",
    "CardTransactionListRequest",
    "CashTransactionListRequest",
    "AccountListRequest",
    "StatementListRequest",
    "CashStatementListRequest",
    "BudgetListRequest",
    "SpendLimitListRequest",
    "BudgetProgramListRequest",
    "ItemRequest",
    "ExpenseItemRequest",
    "AccountItemRequest",
    "BudgetItemRequest",
    "SpendLimitItemRequest",
    "BudgetProgramItemRequest",
    "CustomFieldValue",
    "UpdateExpenseRequest",
]
