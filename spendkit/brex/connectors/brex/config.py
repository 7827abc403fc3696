"""Shared Brex connector constants.

This module centralizes the API base URL, endpoint paths and request limits
used by the endpoint definitions so the connector itself can stay small.
"""

from __future__ import annotations

BASE_URL = "https://platform.brexapis.com"

# Largest ``limit`` any Brex list endpoint accepts
MAX_PAGE_SIZE = 100

# Expenses (v1)
EXPENSES_PATH = "/v1/expenses"
CARD_EXPENSES_PATH = "/v1/expenses/card"

# Transactions (v2)
CARD_TRANSACTIONS_PATH = "/v2/transactions/card/primary"
CASH_TRANSACTIONS_PATH = "/v2/transactions/cash/{account_id}"

# Accounts and statements (v2)
CASH_ACCOUNTS_PATH = "/v2/accounts/cash"
CARD_ACCOUNTS_PATH = "/v2/accounts/card"
CASH_STATEMENTS_PATH = "/v2/accounts/cash/{account_id}/statements"
CARD_STATEMENTS_PATH = "/v2/accounts/card/primary/statements"

# Budgets (v2) and budget programs (v1)
BUDGETS_PATH = "/v2/budgets"
SPEND_LIMITS_PATH = "/v2/spend_limits"
BUDGET_PROGRAMS_PATH = "/v1/budget_programs"

# Card expense listings always expand these objects
CARD_EXPENSE_REQUIRED_EXPAND = ("merchant",)
