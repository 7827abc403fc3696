"""Unit tests for the Brex REST connector and endpoint definitions."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from spendkit.brex.connectors.brex import BrexRESTConnector, build_entity_registry
from spendkit.brex.connectors.brex.rest.endpoints import (
    get_endpoint_adapter,
    get_endpoint_spec,
    list_endpoints,
)
from spendkit.brex.connectors.brex.rest.endpoints.common import (
    PageAdapter,
    extract_cursor,
    merge_expand,
    page_query,
)
from spendkit.brex.core import AuthenticationError, EntityKind, UpstreamError
from spendkit.brex.runtime.paging import PageRequest, PageResponse, Window


@pytest.fixture
def connector():
    connector = BrexRESTConnector("test-token")
    connector._transport.get = AsyncMock(return_value={"items": [], "next_cursor": None})
    connector._transport.put = AsyncMock(return_value={"id": "e1", "status": "APPROVED"})
    return connector


class TestPageAdapter:
    """Test list page parsing."""

    def test_object_page(self):
        page = PageAdapter().parse({"items": [{"id": "a"}], "next_cursor": "c2"}, {})

        assert page == PageResponse(items=[{"id": "a"}], next_cursor="c2")

    def test_camel_case_cursor(self):
        assert extract_cursor({"nextCursor": "c3"}) == "c3"
        assert extract_cursor({"next_cursor": ""}) is None

    def test_bare_array_is_final_page(self):
        page = PageAdapter().parse([{"id": "a"}, {"id": "b"}], {})

        assert len(page.items) == 2
        assert page.next_cursor is None

    def test_malformed_items_become_empty(self):
        page = PageAdapter().parse({"items": {"id": "a"}, "next_cursor": "c"}, {})

        assert page.items == []
        assert page.next_cursor == "c"

    def test_non_object_body_rejected(self):
        with pytest.raises(UpstreamError, match="Invalid page format"):
            PageAdapter().parse("oops", {})


class TestQueryHelpers:
    """Test shared query builders."""

    def test_page_query_clamps_limit(self):
        assert page_query({"limit": 500, "cursor": "c"}) == {"limit": 100, "cursor": "c"}
        assert page_query({}) == {}

    def test_merge_expand(self):
        assert merge_expand(None, ("merchant",)) == ["merchant"]
        assert merge_expand(["budget", "merchant"], ("merchant",)) == ["budget", "merchant"]


class TestEndpointRegistry:
    """Test endpoint lookups."""

    def test_lookups(self):
        assert get_endpoint_spec("expenses").method == "GET"
        assert get_endpoint_spec("update_card_expense").method == "PUT"
        assert get_endpoint_adapter("budgets") is not None
        assert get_endpoint_spec("nope") is None
        assert get_endpoint_adapter("nope") is None
        assert "card_statements" in list_endpoints()

    def test_entity_registry_covers_every_kind(self):
        registry = build_entity_registry()

        assert set(registry.kinds()) == set(EntityKind)
        assert registry is not build_entity_registry()

    def test_window_support(self):
        registry = build_entity_registry()

        assert registry.get(EntityKind.EXPENSE).client_end_path is None
        assert registry.get(EntityKind.CARD_TRANSACTION).client_end_path == "posted_at"
        assert registry.get(EntityKind.BUDGET).supports_windows is False


class TestBrexRESTConnector:
    """Test request construction against a mocked transport."""

    def test_auth_headers(self, connector):
        assert connector._transport._default_headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_expense_page_query(self, connector):
        window = Window(
            start=datetime(2025, 8, 1, tzinfo=UTC),
            end=datetime(2025, 8, 8, tzinfo=UTC),
        )
        request = PageRequest(
            limit=50,
            cursor="c1",
            filters={"status": ["APPROVED"], "expand": ["merchant"]},
            window=window,
        )
        connector._transport.get.return_value = {"items": [{"id": "e1"}], "next_cursor": "c2"}

        page = await connector.fetch_page(EntityKind.EXPENSE, request)

        assert page.items == [{"id": "e1"}]
        assert page.next_cursor == "c2"
        connector._transport.get.assert_awaited_once_with(
            "/v1/expenses",
            params={
                "limit": 50,
                "cursor": "c1",
                "updated_at_start": window.start,
                "updated_at_end": window.end,
                "status[]": ["APPROVED"],
                "expand[]": ["merchant"],
            },
            headers=None,
        )

    @pytest.mark.asyncio
    async def test_card_expenses_always_expand_merchant(self, connector):
        await connector.fetch_page(EntityKind.CARD_EXPENSE, PageRequest(limit=10))

        path, = connector._transport.get.call_args.args
        params = connector._transport.get.call_args.kwargs["params"]
        assert path == "/v1/expenses/card"
        assert params["expand[]"] == ["merchant"]

    @pytest.mark.asyncio
    async def test_card_transactions_send_start_only(self, connector):
        window = Window(
            start=datetime(2025, 8, 1, tzinfo=UTC),
            end=datetime(2025, 8, 8, tzinfo=UTC),
        )
        await connector.fetch_page(
            EntityKind.CARD_TRANSACTION, PageRequest(limit=10, window=window)
        )

        params = connector._transport.get.call_args.kwargs["params"]
        assert params == {"limit": 10, "posted_at_start": window.start}

    @pytest.mark.asyncio
    async def test_cash_transactions_path(self, connector):
        await connector.fetch_page(
            EntityKind.CASH_TRANSACTION,
            PageRequest(limit=10, filters={"account_id": "cash_1"}),
        )

        assert connector._transport.get.call_args.args[0] == "/v2/transactions/cash/cash_1"

    @pytest.mark.asyncio
    async def test_card_accounts_bare_array(self, connector):
        connector._transport.get.return_value = [{"id": "ca1", "status": "ACTIVE"}]

        page = await connector.fetch_page(EntityKind.CARD_ACCOUNT, PageRequest(limit=10))

        assert page.items == [{"id": "ca1", "status": "ACTIVE"}]
        assert page.next_cursor is None

    @pytest.mark.asyncio
    async def test_fetch_one(self, connector):
        connector._transport.get.return_value = {"id": "b1"}

        result = await connector.fetch_one(EntityKind.BUDGET, "b1")

        assert result == {"id": "b1"}
        assert connector._transport.get.call_args.args[0] == "/v2/budgets/b1"

    @pytest.mark.asyncio
    async def test_update_card_expense(self, connector):
        result = await connector.update_card_expense("e1", {"memo": "lunch"})

        assert result == {"id": "e1", "status": "APPROVED"}
        connector._transport.put.assert_awaited_once_with(
            "/v1/expenses/card/e1", json_body={"memo": "lunch"}, headers=None
        )

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        connector = BrexRESTConnector(None)
        connector._transport.get = AsyncMock()

        with pytest.raises(AuthenticationError, match="not configured") as exc_info:
            await connector.fetch_page(EntityKind.EXPENSE, PageRequest(limit=10))

        assert "BREX_API_KEY" in str(exc_info.value)
        connector._transport.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_endpoint(self, connector):
        with pytest.raises(ValueError, match="Unknown REST endpoint"):
            await connector.fetch("nope", {})

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self):
        async with BrexRESTConnector("t") as connector:
            connector._transport.close = AsyncMock()
        connector._transport.close.assert_awaited_once()
