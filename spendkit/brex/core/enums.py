"""Core enumerations for standardized types across all Brex entities.

Architecture:
    This module defines the string enums used by request models, endpoint
    specs and the entity registry. String enums serialise directly into
    upstream query parameters and JSON envelopes.

Key Types:
    - EntityKind: Every upstream resource the engine can page through
    - ExpenseType / ExpenseStatus / ExpensePaymentStatus: Expense filters
    - AccountStatus: Cash and card account lifecycle
    - SpendBudgetStatus / SpendLimitStatus / BudgetProgramStatus: Budget filters

See Also:
    - EntityRegistry: Maps EntityKind to endpoint definitions
    - models.requests: Request structs that validate these values
"""

from enum import Enum


class EntityKind(str, Enum):
    """Upstream resource kinds served by the engine."""

    EXPENSE = "expense"
    CARD_EXPENSE = "card_expense"
    CARD_TRANSACTION = "card_transaction"
    CASH_TRANSACTION = "cash_transaction"
    CASH_ACCOUNT = "cash_account"
    CARD_ACCOUNT = "card_account"
    CASH_STATEMENT = "cash_statement"
    CARD_STATEMENT = "card_statement"
    BUDGET = "budget"
    SPEND_LIMIT = "spend_limit"
    BUDGET_PROGRAM = "budget_program"


class ExpenseType(str, Enum):
    CARD = "CARD"
    BILLPAY = "BILLPAY"
    REIMBURSEMENT = "REIMBURSEMENT"
    CLAWBACK = "CLAWBACK"
    UNSET = "UNSET"


class ExpenseStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    OUT_OF_POLICY = "OUT_OF_POLICY"
    VOID = "VOID"
    CANCELED = "CANCELED"
    SPLIT = "SPLIT"
    SETTLED = "SETTLED"


class ExpensePaymentStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    PROCESSING = "PROCESSING"
    CANCELED = "CANCELED"
    DECLINED = "DECLINED"
    CLEARED = "CLEARED"
    REFUNDING = "REFUNDING"
    REFUNDED = "REFUNDED"
    CASH_ADVANCE = "CASH_ADVANCE"
    CREDITED = "CREDITED"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    SCHEDULED = "SCHEDULED"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    CLOSED = "CLOSED"


class SpendBudgetStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    DRAFT = "DRAFT"


class SpendLimitStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class BudgetProgramStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
