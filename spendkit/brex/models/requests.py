"""Typed request structs, one per operation kind.

Architecture:
    Every operation validates its flat argument mapping exactly once into one
    of these models before anything reaches the engine. List requests share
    the paging, windowing, amount and shaping arguments defined on
    ``ListRequest``; entity-specific subclasses add their own server-side
    filters and client-side predicates.

Design Decisions:
    - Unknown keys are ignored so agents can pass extra context harmlessly
    - Scalars are accepted where lists are expected (``status="APPROVED"``)
    - Dates accept ISO-8601 strings with or without a ``Z`` suffix; naive
      values are treated as UTC
    - Cross-field checks (``min_amount <= max_amount``, ``start <= end``)
      live in model validators so they fail before any upstream call

See Also:
    - runtime.operations.OperationRegistry: Validates into these models
    - runtime.engine.CollectionEngine: Consumes them
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.enums import (
    AccountStatus,
    BudgetProgramStatus,
    ExpensePaymentStatus,
    ExpenseStatus,
    ExpenseType,
    SpendBudgetStatus,
    SpendLimitStatus,
)


def _as_list(value: Any) -> Any:
    """Wrap scalars and split comma-separated strings."""
    if value is None:
        return None
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
        return [p for p in parts if p]
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _parse_datetime(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"not an ISO-8601 date: {value!r}") from e
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)


class ShapingArgs(_Request):
    """Arguments shared by every read operation."""

    summary_only: bool = False
    fields: list[str] | None = None

    @field_validator("fields", mode="before")
    @classmethod
    def _split_fields(cls, v: Any) -> Any:
        return _as_list(v)


class ListRequest(ShapingArgs):
    """Paging, windowing and amount arguments accepted by every list operation."""

    page_size: int | None = Field(default=None, ge=1, le=100)
    max_items: int | None = Field(default=None, ge=1)
    cursor: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    window_days: int | None = Field(default=None, ge=1)
    min_amount: float | None = Field(default=None, ge=0)
    max_amount: float | None = Field(default=None, ge=0)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, v: Any) -> Any:
        return _parse_datetime(v)

    @field_validator("cursor", mode="before")
    @classmethod
    def _empty_cursor(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_ranges(self) -> ListRequest:
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValueError("min_amount cannot be greater than max_amount")
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValueError("start_date cannot be after end_date")
        return self

    def server_filters(self) -> dict[str, Any]:
        """Entity-specific filters forwarded to the upstream query."""
        return {}

    def text_filter(self) -> str | None:
        """Substring matched client-side against the entity's descriptor."""
        return None

    def status_filter(self) -> str | None:
        """Status matched client-side against the entity's status field."""
        return None

    def echo(self) -> dict[str, Any]:
        """Parameters as the caller effectively supplied them."""
        return self.model_dump(mode="json", exclude_none=True, exclude_defaults=True)


class ExpenseListRequest(ListRequest):
    expense_type: list[ExpenseType] | None = None
    status: list[ExpenseStatus] | None = None
    payment_status: list[ExpensePaymentStatus] | None = None
    merchant_name: str | None = Field(default=None, min_length=1)
    expand: list[str] | None = None

    @field_validator("expense_type", "status", "payment_status", "expand", mode="before")
    @classmethod
    def _listify(cls, v: Any) -> Any:
        return _as_list(v)

    def server_filters(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.expense_type:
            out["expense_type"] = [t.value for t in self.expense_type]
        if self.status:
            out["status"] = [s.value for s in self.status]
        if self.payment_status:
            out["payment_status"] = [s.value for s in self.payment_status]
        if self.expand is not None:
            out["expand"] = list(self.expand)
        return out

    def text_filter(self) -> str | None:
        return self.merchant_name


class CardExpenseListRequest(ExpenseListRequest):
    """Card expenses; the endpoint implies ``expense_type=CARD``."""

    def server_filters(self) -> dict[str, Any]:
        out = super().server_filters()
        out.pop("expense_type", None)
        return out


class CardTransactionListRequest(ListRequest):
    user_ids: list[str] | None = None
    merchant_name: str | None = Field(default=None, min_length=1)
    expand: list[str] | None = None

    @field_validator("user_ids", "expand", mode="before")
    @classmethod
    def _listify(cls, v: Any) -> Any:
        return _as_list(v)

    def server_filters(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.user_ids:
            out["user_ids"] = list(self.user_ids)
        if self.expand is not None:
            out["expand"] = list(self.expand)
        return out

    def text_filter(self) -> str | None:
        return self.merchant_name


class CashTransactionListRequest(ListRequest):
    account_id: str = Field(..., min_length=1)
    expand: list[str] | None = None

    @field_validator("expand", mode="before")
    @classmethod
    def _listify(cls, v: Any) -> Any:
        return _as_list(v)

    def server_filters(self) -> dict[str, Any]:
        out: dict[str, Any] = {"account_id": self.account_id}
        if self.expand is not None:
            out["expand"] = list(self.expand)
        return out


class AccountListRequest(ListRequest):
    status: AccountStatus | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def status_filter(self) -> str | None:
        return self.status.value if self.status else None


class StatementListRequest(ListRequest):
    pass


class CashStatementListRequest(ListRequest):
    account_id: str = Field(..., min_length=1)

    def server_filters(self) -> dict[str, Any]:
        return {"account_id": self.account_id}


class BudgetListRequest(ListRequest):
    parent_budget_id: str | None = None
    spend_budget_status: SpendBudgetStatus | None = None

    def server_filters(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.parent_budget_id:
            out["parent_budget_id"] = self.parent_budget_id
        if self.spend_budget_status:
            out["spend_budget_status"] = self.spend_budget_status.value
        return out


class SpendLimitListRequest(ListRequest):
    parent_budget_id: str | None = None
    status: SpendLimitStatus | None = None
    member_user_id: str | None = None

    def server_filters(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.parent_budget_id:
            out["parent_budget_id"] = self.parent_budget_id
        if self.status:
            out["status"] = self.status.value
        if self.member_user_id:
            out["member_user_id"] = self.member_user_id
        return out


class BudgetProgramListRequest(ListRequest):
    budget_program_status: BudgetProgramStatus | None = None

    def server_filters(self) -> dict[str, Any]:
        if self.budget_program_status:
            return {"budget_program_status": self.budget_program_status.value}
        return {}


class ItemRequest(ShapingArgs):
    """Single-object read; subclasses name the identifier field."""

    id_field: ClassVar[str] = "id"

    @property
    def item_id(self) -> str:
        return getattr(self, self.id_field)

    def params(self) -> dict[str, Any]:
        """Extra request parameters for the single-object endpoint."""
        return {}


class ExpenseItemRequest(ItemRequest):
    id_field: ClassVar[str] = "expense_id"
    expense_id: str = Field(..., min_length=1)
    expand: list[str] | None = None

    @field_validator("expand", mode="before")
    @classmethod
    def _listify(cls, v: Any) -> Any:
        return _as_list(v)

    def params(self) -> dict[str, Any]:
        return {"expand": list(self.expand)} if self.expand is not None else {}


class AccountItemRequest(ItemRequest):
    id_field: ClassVar[str] = "account_id"
    account_id: str = Field(..., min_length=1)


class BudgetItemRequest(ItemRequest):
    id_field: ClassVar[str] = "budget_id"
    budget_id: str = Field(..., min_length=1)


class SpendLimitItemRequest(ItemRequest):
    id_field: ClassVar[str] = "spend_limit_id"
    spend_limit_id: str = Field(..., min_length=1)


class BudgetProgramItemRequest(ItemRequest):
    id_field: ClassVar[str] = "budget_program_id"
    budget_program_id: str = Field(..., min_length=1)


class CustomFieldValue(_Request):
    key: str = Field(..., min_length=1)
    value: Any = None


class UpdateExpenseRequest(_Request):
    """Write request for a card expense; at least one update field is required."""

    expense_id: str = Field(..., min_length=1)
    memo: str | None = None
    category: str | None = None
    budget_id: str | None = None
    department_id: str | None = None
    location_id: str | None = None
    custom_fields: list[CustomFieldValue] | None = None

    @model_validator(mode="after")
    def _require_update(self) -> UpdateExpenseRequest:
        if not self.body():
            raise ValueError(
                "At least one update field is required (memo, category, budget_id, "
                "department_id, location_id or custom_fields)"
            )
        return self

    def body(self) -> dict[str, Any]:
        """Upstream PUT body with unset fields dropped."""
        return self.model_dump(mode="json", exclude={"expense_id"}, exclude_none=True)
