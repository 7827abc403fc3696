"""Core components."""

from .enums import (
    AccountStatus,
    BudgetProgramStatus,
    EntityKind,
    ExpensePaymentStatus,
    ExpenseStatus,
    ExpenseType,
    SpendBudgetStatus,
    SpendLimitStatus,
)
from .exceptions import (
    AuthenticationError,
    BrexToolError,
    NotFoundError,
    RateLimitError,
    RegistryError,
    UnknownEntityError,
    UnknownOperationError,
    UpstreamError,
    ValidationError,
)
from .settings import BrexSettings, load_settings

__all__ = [
    "EntityKind",
    "ExpenseType",
    "ExpenseStatus",
    "ExpensePaymentStatus",
    "AccountStatus",
    "SpendBudgetStatus",
    "SpendLimitStatus",
    "BudgetProgramStatus",
    "BrexToolError",
    "ValidationError",
    "UpstreamError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "RegistryError",
    "UnknownOperationError",
    "UnknownEntityError",
    "BrexSettings",
    "load_settings",
]
