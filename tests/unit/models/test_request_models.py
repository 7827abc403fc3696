"""Unit tests for typed request models."""

from __future__ import annotations

from datetime import UTC, datetime

import pydantic
import pytest

from spendkit.brex.core import AccountStatus, ExpenseStatus
from spendkit.brex.models import (
    AccountListRequest,
    CardExpenseListRequest,
    CardTransactionListRequest,
    CashTransactionListRequest,
    ExpenseItemRequest,
    ExpenseListRequest,
    ListRequest,
    UpdateExpenseRequest,
)


class TestListRequest:
    """Test shared list arguments."""

    def test_defaults(self):
        request = ListRequest()

        assert request.page_size is None
        assert request.summary_only is False
        assert request.echo() == {}

    def test_dates_accept_z_suffix_and_naive(self):
        request = ListRequest(start_date="2025-08-01T00:00:00Z", end_date="2025-08-15")

        assert request.start_date == datetime(2025, 8, 1, tzinfo=UTC)
        assert request.end_date == datetime(2025, 8, 15, tzinfo=UTC)

    def test_invalid_date_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="ISO-8601"):
            ListRequest(start_date="last tuesday")

    def test_min_amount_above_max_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="min_amount cannot be greater"):
            ListRequest(min_amount=100, max_amount=50)

    def test_start_after_end_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="start_date cannot be after"):
            ListRequest(start_date="2025-08-15", end_date="2025-08-01")

    @pytest.mark.parametrize(
        "field,value",
        [("page_size", 0), ("page_size", 101), ("max_items", 0), ("window_days", 0)],
    )
    def test_bounds(self, field, value):
        with pytest.raises(pydantic.ValidationError):
            ListRequest(**{field: value})

    def test_negative_amount_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ListRequest(min_amount=-1)

    def test_blank_cursor_is_none(self):
        assert ListRequest(cursor="  ").cursor is None

    def test_fields_accept_comma_string(self):
        assert ListRequest(fields="id, status").fields == ["id", "status"]

    def test_unknown_keys_ignored(self):
        assert ListRequest(page_size=5, reasoning="because").page_size == 5

    def test_echo_reports_supplied_parameters(self):
        request = ListRequest(page_size=10, start_date="2025-08-01", summary_only=True)

        assert request.echo() == {
            "page_size": 10,
            "start_date": "2025-08-01T00:00:00Z",
            "summary_only": True,
        }

    def test_frozen(self):
        request = ListRequest(page_size=10)
        with pytest.raises(pydantic.ValidationError):
            request.page_size = 20


class TestExpenseListRequest:
    """Test expense filters."""

    def test_scalar_status_becomes_list(self):
        request = ExpenseListRequest(status="APPROVED")

        assert request.status == [ExpenseStatus.APPROVED]
        assert request.server_filters() == {"status": ["APPROVED"]}

    def test_invalid_enum_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ExpenseListRequest(status=["NOT_A_STATUS"])

    def test_server_filters(self):
        request = ExpenseListRequest(
            expense_type=["CARD"],
            payment_status=["CLEARED"],
            expand=["merchant"],
            merchant_name="acme",
        )

        assert request.server_filters() == {
            "expense_type": ["CARD"],
            "payment_status": ["CLEARED"],
            "expand": ["merchant"],
        }
        assert request.text_filter() == "acme"

    def test_card_expenses_drop_expense_type(self):
        request = CardExpenseListRequest(expense_type=["REIMBURSEMENT"], status=["APPROVED"])

        assert "expense_type" not in request.server_filters()


class TestOtherListRequests:
    """Test entity-specific list requests."""

    def test_card_transactions(self):
        request = CardTransactionListRequest(user_ids="u1,u2", merchant_name="uber")

        assert request.server_filters() == {"user_ids": ["u1", "u2"]}
        assert request.text_filter() == "uber"

    def test_cash_transactions_require_account(self):
        with pytest.raises(pydantic.ValidationError):
            CashTransactionListRequest()
        assert CashTransactionListRequest(account_id="a1").server_filters() == {
            "account_id": "a1"
        }

    def test_account_status_case_insensitive(self):
        request = AccountListRequest(status="active")

        assert request.status is AccountStatus.ACTIVE
        assert request.status_filter() == "ACTIVE"


class TestItemAndUpdateRequests:
    """Test single-object and write requests."""

    def test_item_id(self):
        request = ExpenseItemRequest(expense_id="e1", expand="merchant")

        assert request.item_id == "e1"
        assert request.params() == {"expand": ["merchant"]}

    def test_item_id_required(self):
        with pytest.raises(pydantic.ValidationError):
            ExpenseItemRequest(expense_id="")

    def test_update_requires_a_field(self):
        with pytest.raises(pydantic.ValidationError, match="At least one update field"):
            UpdateExpenseRequest(expense_id="e1")

    def test_update_body(self):
        request = UpdateExpenseRequest(
            expense_id="e1",
            memo="team lunch",
            custom_fields=[{"key": "project", "value": "apollo"}],
        )

        assert request.body() == {
            "memo": "team lunch",
            "custom_fields": [{"key": "project", "value": "apollo"}],
        }
