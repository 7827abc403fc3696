"""Brex MCP server.

Exposes the Brex operations as MCP tools, a handful of read-only resources
and two analysis prompts. Every tool is a thin wrapper that forwards its
arguments to the operation registry and returns the engine's envelope.

Run:
    spendkit-brex-mcp --transport stdio
    spendkit-brex-mcp --transport streamable-http --host 0.0.0.0 --port 9010
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError

from ..api import BrexAPI
from ..core.exceptions import BrexToolError

logger = logging.getLogger(__name__)

DEFAULT_HTTP_PORT = 9010

mcp = FastMCP(
    "brex",
    instructions=(
        "Brex expenses, transactions, accounts, statements and budgets. "
        "Large results are summarized automatically; pass summary_only and a short "
        "fields list to control the payload, and split long date ranges with "
        "window_days. Read brex://docs/usage for patterns."
    ),
)

# ---------------------------------------------------------------------------
# API management
# ---------------------------------------------------------------------------

_api: BrexAPI | None = None
_api_lock = asyncio.Lock()


async def _get_api() -> BrexAPI:
    global _api
    if _api is not None:
        return _api
    async with _api_lock:
        if _api is None:
            _api = BrexAPI()
        return _api


def set_api(api: BrexAPI | None) -> None:
    """Replace the shared API instance (used by tests and embedding hosts)."""
    global _api
    _api = api


def _args(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


async def _call(name: str, arguments: dict[str, Any]) -> Any:
    api = await _get_api()
    try:
        return await api.call(name, arguments)
    except BrexToolError as e:
        logger.warning("tool_failed", extra={"tool": name, "error_type": type(e).__name__})
        raise ToolError(f"{name} failed: {e}") from e


# ---------------------------------------------------------------------------
# Expense tools
# ---------------------------------------------------------------------------


@mcp.tool("get_all_expenses")
async def get_all_expenses(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    window_days: int | None = None,
    min_amount: float | None = None,
    max_amount: float | None = None,
    expense_type: list[str] | None = None,
    status: list[str] | None = None,
    payment_status: list[str] | None = None,
    merchant_name: str | None = None,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List expenses across pages, optionally split into date windows.

    Dates filter on ``updated_at``. Amount thresholds and ``merchant_name``
    are applied client-side before ``max_items`` is counted.
    """
    return await _call(
        "get_all_expenses",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            start_date=start_date,
            end_date=end_date,
            window_days=window_days,
            min_amount=min_amount,
            max_amount=max_amount,
            expense_type=expense_type,
            status=status,
            payment_status=payment_status,
            merchant_name=merchant_name,
            expand=expand,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_expenses")
async def get_expenses(
    page_size: int | None = None,
    cursor: str | None = None,
    expense_type: list[str] | None = None,
    status: list[str] | None = None,
    payment_status: list[str] | None = None,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List a single page of expenses. Use ``next_cursor`` to continue."""
    return await _call(
        "get_expenses",
        _args(
            page_size=page_size,
            cursor=cursor,
            expense_type=expense_type,
            status=status,
            payment_status=payment_status,
            expand=expand,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_all_card_expenses")
async def get_all_card_expenses(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    window_days: int | None = None,
    min_amount: float | None = None,
    max_amount: float | None = None,
    status: list[str] | None = None,
    payment_status: list[str] | None = None,
    merchant_name: str | None = None,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List card expenses across pages, optionally split into date windows."""
    return await _call(
        "get_all_card_expenses",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            start_date=start_date,
            end_date=end_date,
            window_days=window_days,
            min_amount=min_amount,
            max_amount=max_amount,
            status=status,
            payment_status=payment_status,
            merchant_name=merchant_name,
            expand=expand,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_expense")
async def get_expense(
    expense_id: str,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """Get one expense by ID."""
    return await _call(
        "get_expense",
        _args(expense_id=expense_id, expand=expand, summary_only=summary_only, fields=fields),
    )


@mcp.tool("get_card_expense")
async def get_card_expense(
    expense_id: str,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """Get one card expense by ID."""
    return await _call(
        "get_card_expense",
        _args(expense_id=expense_id, expand=expand, summary_only=summary_only, fields=fields),
    )


@mcp.tool("update_expense")
async def update_expense(
    expense_id: str,
    memo: str | None = None,
    category: str | None = None,
    budget_id: str | None = None,
    department_id: str | None = None,
    location_id: str | None = None,
    custom_fields: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Update a card expense. At least one field besides ``expense_id`` is required."""
    return await _call(
        "update_expense",
        _args(
            expense_id=expense_id,
            memo=memo,
            category=category,
            budget_id=budget_id,
            department_id=department_id,
            location_id=location_id,
            custom_fields=custom_fields,
        ),
    )


# ---------------------------------------------------------------------------
# Transaction tools
# ---------------------------------------------------------------------------


@mcp.tool("get_card_transactions")
async def get_card_transactions(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    window_days: int | None = None,
    min_amount: float | None = None,
    max_amount: float | None = None,
    user_ids: list[str] | None = None,
    merchant_name: str | None = None,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List primary card transactions. Dates filter on ``posted_at``."""
    return await _call(
        "get_card_transactions",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            start_date=start_date,
            end_date=end_date,
            window_days=window_days,
            min_amount=min_amount,
            max_amount=max_amount,
            user_ids=user_ids,
            merchant_name=merchant_name,
            expand=expand,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_cash_transactions")
async def get_cash_transactions(
    account_id: str,
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    window_days: int | None = None,
    min_amount: float | None = None,
    max_amount: float | None = None,
    expand: list[str] | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List transactions for one cash account (requires cash scopes)."""
    return await _call(
        "get_cash_transactions",
        _args(
            account_id=account_id,
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            start_date=start_date,
            end_date=end_date,
            window_days=window_days,
            min_amount=min_amount,
            max_amount=max_amount,
            expand=expand,
            summary_only=summary_only,
            fields=fields,
        ),
    )


# ---------------------------------------------------------------------------
# Account and statement tools
# ---------------------------------------------------------------------------


@mcp.tool("get_all_accounts")
async def get_all_accounts(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    status: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List cash accounts, optionally filtered by ``status`` (ACTIVE, INACTIVE, CLOSED)."""
    return await _call(
        "get_all_accounts",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            status=status,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_card_accounts")
async def get_card_accounts(
    status: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List card accounts, optionally filtered by ``status``."""
    return await _call(
        "get_card_accounts",
        _args(status=status, summary_only=summary_only, fields=fields),
    )


@mcp.tool("get_account_details")
async def get_account_details(
    account_id: str,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """Get one cash account by ID."""
    return await _call(
        "get_account_details",
        _args(account_id=account_id, summary_only=summary_only, fields=fields),
    )


@mcp.tool("get_card_statements_primary")
async def get_card_statements_primary(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List finalized statements for the primary card account."""
    return await _call(
        "get_card_statements_primary",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_cash_account_statements")
async def get_cash_account_statements(
    account_id: str,
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List finalized statements for one cash account."""
    return await _call(
        "get_cash_account_statements",
        _args(
            account_id=account_id,
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            summary_only=summary_only,
            fields=fields,
        ),
    )


# ---------------------------------------------------------------------------
# Budget tools
# ---------------------------------------------------------------------------


@mcp.tool("get_budgets")
async def get_budgets(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    parent_budget_id: str | None = None,
    spend_budget_status: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List budgets."""
    return await _call(
        "get_budgets",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            parent_budget_id=parent_budget_id,
            spend_budget_status=spend_budget_status,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_budget")
async def get_budget(
    budget_id: str,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """Get one budget by ID."""
    return await _call(
        "get_budget",
        _args(budget_id=budget_id, summary_only=summary_only, fields=fields),
    )


@mcp.tool("get_spend_limits")
async def get_spend_limits(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    parent_budget_id: str | None = None,
    status: str | None = None,
    member_user_id: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List spend limits."""
    return await _call(
        "get_spend_limits",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            parent_budget_id=parent_budget_id,
            status=status,
            member_user_id=member_user_id,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_spend_limit")
async def get_spend_limit(
    spend_limit_id: str,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """Get one spend limit by ID."""
    return await _call(
        "get_spend_limit",
        _args(spend_limit_id=spend_limit_id, summary_only=summary_only, fields=fields),
    )


@mcp.tool("get_budget_programs")
async def get_budget_programs(
    page_size: int | None = None,
    max_items: int | None = None,
    cursor: str | None = None,
    budget_program_status: str | None = None,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """List budget programs."""
    return await _call(
        "get_budget_programs",
        _args(
            page_size=page_size,
            max_items=max_items,
            cursor=cursor,
            budget_program_status=budget_program_status,
            summary_only=summary_only,
            fields=fields,
        ),
    )


@mcp.tool("get_budget_program")
async def get_budget_program(
    budget_program_id: str,
    summary_only: bool = False,
    fields: list[str] | None = None,
) -> dict[str, Any]:
    """Get one budget program by ID."""
    return await _call(
        "get_budget_program",
        _args(budget_program_id=budget_program_id, summary_only=summary_only, fields=fields),
    )


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

USAGE_GUIDE: dict[str, Any] = {
    "title": "Brex MCP Usage Guide",
    "key_principles": [
        "Default to summary_only=true with a tight fields list",
        "Split long date ranges with window_days (e.g. 7)",
        "Keep page_size <= 50 and raise max_items only when needed",
        "Use get_all_* tools for pagination and get_* tools for single objects",
        "Payloads above the size ceiling are summarized automatically; "
        "check meta.summary_applied",
        "meta.page_budget_exhausted means the upstream page ceiling was hit; "
        "narrow the date range or filters",
    ],
    "common_parameters": {
        "summary_only": "boolean - project items to a compact field set",
        "fields": "string[] - dot-notation paths to keep (e.g. purchased_amount.amount)",
        "page_size": "number - items per upstream page (1..100)",
        "max_items": "number - cap on items returned across all pages",
        "cursor": "string - continue a single-window listing from meta.next_cursor",
        "start_date": "ISO-8601 - inclusive lower bound",
        "end_date": "ISO-8601 - exclusive upper bound",
        "window_days": "number - window length used to split the date range",
        "min_amount": "number - client-side inclusive minimum amount",
        "max_amount": "number - client-side inclusive maximum amount",
    },
    "recommended_patterns": [
        {
            "name": "Recent card expenses above 100, weekly windows",
            "tool": "get_all_card_expenses",
            "arguments": {
                "page_size": 50,
                "max_items": 200,
                "start_date": "2025-08-01T00:00:00Z",
                "end_date": "2025-08-18T00:00:00Z",
                "window_days": 7,
                "min_amount": 100,
                "summary_only": True,
                "fields": [
                    "id",
                    "updated_at",
                    "status",
                    "purchased_amount.amount",
                    "purchased_amount.currency",
                    "merchant.raw_descriptor",
                ],
            },
        },
        {
            "name": "Small sample of approved expenses",
            "tool": "get_expenses",
            "arguments": {"page_size": 5, "status": ["APPROVED"], "summary_only": True},
        },
    ],
}


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


@mcp.resource("brex://expenses", mime_type="application/json")
async def expenses_resource() -> str:
    """One default page of expenses."""
    return _to_json(await _call("get_expenses", {}))


@mcp.resource("brex://expenses/card", mime_type="application/json")
async def card_expenses_resource() -> str:
    """One default page of card expenses."""
    return _to_json(await _call("get_all_card_expenses", {"max_items": 50}))


@mcp.resource("brex://expenses/{expense_id}", mime_type="application/json")
async def expense_resource(expense_id: str) -> str:
    """One expense by ID."""
    return _to_json(await _call("get_expense", {"expense_id": expense_id}))


@mcp.resource("brex://expenses/card/{expense_id}", mime_type="application/json")
async def card_expense_resource(expense_id: str) -> str:
    """One card expense by ID."""
    return _to_json(await _call("get_card_expense", {"expense_id": expense_id}))


@mcp.resource("brex://accounts", mime_type="application/json")
async def accounts_resource() -> str:
    """One default page of cash accounts."""
    return _to_json(await _call("get_all_accounts", {"max_items": 50}))


@mcp.resource("brex://accounts/{account_id}", mime_type="application/json")
async def account_resource(account_id: str) -> str:
    """One cash account by ID."""
    return _to_json(await _call("get_account_details", {"account_id": account_id}))


@mcp.resource("brex://accounts/card", mime_type="application/json")
async def card_accounts_resource() -> str:
    """All card accounts."""
    return _to_json(await _call("get_card_accounts", {}))


@mcp.resource("brex://accounts/card/{account_id}", mime_type="application/json")
async def card_account_resource(account_id: str) -> str:
    """One card account by ID, selected from the card account listing."""
    listing = await _call("get_card_accounts", {})
    for account in listing["accounts"]:
        if account.get("id") == account_id:
            return _to_json(
                {"account": account, "meta": {"summary_applied": listing["meta"]["summary_applied"]}}
            )
    raise ResourceError(f"Card account {account_id} not found")


@mcp.resource("brex://accounts/card/primary/statements", mime_type="application/json")
async def card_statements_resource() -> str:
    """One default page of primary card statements."""
    return _to_json(await _call("get_card_statements_primary", {"max_items": 50}))


@mcp.resource("brex://accounts/cash", mime_type="application/json")
async def cash_accounts_resource() -> str:
    """One default page of cash accounts."""
    return _to_json(await _call("get_all_accounts", {"max_items": 50}))


@mcp.resource("brex://accounts/cash/{account_id}", mime_type="application/json")
async def cash_account_resource(account_id: str) -> str:
    """One cash account by ID."""
    return _to_json(await _call("get_account_details", {"account_id": account_id}))


@mcp.resource("brex://accounts/cash/{account_id}/statements", mime_type="application/json")
async def cash_statements_resource(account_id: str) -> str:
    """One default page of statements for a cash account."""
    return _to_json(
        await _call("get_cash_account_statements", {"account_id": account_id, "max_items": 50})
    )


@mcp.resource("brex://budgets", mime_type="application/json")
async def budgets_resource() -> str:
    """One default page of budgets."""
    return _to_json(await _call("get_budgets", {"max_items": 50}))


@mcp.resource("brex://budgets/{budget_id}", mime_type="application/json")
async def budget_resource(budget_id: str) -> str:
    """One budget by ID."""
    return _to_json(await _call("get_budget", {"budget_id": budget_id}))


@mcp.resource("brex://spend_limits", mime_type="application/json")
async def spend_limits_resource() -> str:
    """One default page of spend limits."""
    return _to_json(await _call("get_spend_limits", {"max_items": 50}))


@mcp.resource("brex://budget_programs", mime_type="application/json")
async def budget_programs_resource() -> str:
    """One default page of budget programs."""
    return _to_json(await _call("get_budget_programs", {"max_items": 50}))


@mcp.resource("brex://docs/usage", mime_type="application/json")
def usage_resource() -> str:
    """Usage guide for agents."""
    return _to_json(USAGE_GUIDE)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


@mcp.prompt("summarize_expenses")
async def summarize_expenses() -> str:
    """Analyze recent card and reimbursement expenses."""
    card = await _call(
        "get_expenses", {"expense_type": ["CARD"], "page_size": 50, "summary_only": True}
    )
    reimbursements = await _call(
        "get_expenses", {"expense_type": ["REIMBURSEMENT"], "page_size": 50, "summary_only": True}
    )
    return (
        "Please analyze the following Brex expenses.\n\n"
        f"Card expenses:\n{_to_json(card)}\n\n"
        f"Reimbursements:\n{_to_json(reimbursements)}\n\n"
        "Provide a summary of expenses, including:\n"
        "1. Total amount by expense type (card vs reimbursement)\n"
        "2. Breakdown by expense status\n"
        "3. Top merchants or vendors by spend\n"
        "4. Any notable patterns or unusual expenses"
    )


@mcp.prompt("summarize_transactions")
async def summarize_transactions() -> str:
    """Analyze recent primary card transactions."""
    transactions = await _call(
        "get_card_transactions", {"page_size": 50, "max_items": 50, "summary_only": True}
    )
    return (
        "Please analyze the following Brex card transactions.\n\n"
        f"{_to_json(transactions)}\n\n"
        "Provide a summary including:\n"
        "1. Total spend and number of transactions\n"
        "2. Top merchants by spend\n"
        "3. Any unusually large or repeated charges"
    )


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the stdio protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def run(
    transport: str = "stdio",
    host: str = "0.0.0.0",
    port: int = DEFAULT_HTTP_PORT,
) -> None:  # pragma: no cover - integration entrypoint
    """Run the MCP server with the specified transport."""
    if transport == "streamable-http":
        mcp.run(
            transport="streamable-http",
            host=host,
            port=port,
            json_response=True,
            stateless_http=True,
            uvicorn_config={"access_log": False},
        )
    else:
        mcp.run(transport="stdio")


def main() -> None:  # pragma: no cover - CLI helper
    parser = argparse.ArgumentParser(description="Brex MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default="stdio",
        help="Transport protocol to use",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind HTTP server to")
    parser.add_argument("--port", type=int, default=DEFAULT_HTTP_PORT, help="Port for HTTP server")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    api = BrexAPI()
    set_api(api)
    configure_logging(args.log_level or api.settings.log_level)
    logger.info("server_starting", extra={"transport": args.transport})
    run(args.transport, args.host, args.port)


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["mcp", "run", "main", "set_api", "configure_logging"]
