"""Unit tests for HTTPClient.

Tests focus on session management, query encoding and upstream error
classification.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from spendkit.brex.core import (
    AuthenticationError,
    ExpenseStatus,
    NotFoundError,
    RateLimitError,
    UpstreamError,
)
from spendkit.brex.runtime.rest import HTTPClient
from spendkit.brex.runtime.rest.http_client import encode_params


def _mock_response(status=200, payload=None, text="", headers=None, json_error=None):
    response = AsyncMock()
    response.status = status
    response.headers = headers or {}
    response.text = AsyncMock(return_value=text)
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=payload)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def _client_with(response) -> tuple[HTTPClient, MagicMock]:
    client = HTTPClient(base_url="https://api.example.com/")
    session = MagicMock()
    session.closed = False
    session.request = MagicMock(return_value=response)
    client._session = session
    return client, session


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        client = HTTPClient(base_url="https://api.example.com/", timeout=10.0)
        assert client.timeout.total == 10.0
        assert client.base_url == "https://api.example.com"
        assert client._session is None

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        await client.close()
        assert session.closed

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        client = HTTPClient()
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with HTTPClient() as client:
            assert client.session is not None
        assert client._session is None


class TestEncodeParams:
    """Test query parameter flattening."""

    def test_lists_become_repeated_keys(self):
        pairs = encode_params({"status[]": ["APPROVED", "SETTLED"], "limit": 50})
        assert pairs == [("status[]", "APPROVED"), ("status[]", "SETTLED"), ("limit", "50")]

    def test_none_values_dropped(self):
        assert encode_params({"cursor": None}) is None
        assert encode_params({}) is None

    def test_scalar_conversions(self):
        stamp = datetime(2025, 8, 1, tzinfo=UTC)
        pairs = encode_params({"flag": True, "at": stamp, "status": ExpenseStatus.APPROVED})
        assert pairs == [
            ("flag", "true"),
            ("at", "2025-08-01T00:00:00+00:00"),
            ("status", "APPROVED"),
        ]


class TestHTTPClientRequests:
    """Test request execution and error mapping."""

    @pytest.mark.asyncio
    async def test_get_success(self):
        client, session = _client_with(_mock_response(payload={"items": []}))

        result = await client.get("/v1/expenses", params={"limit": 5})

        assert result == {"items": []}
        session.request.assert_called_once_with(
            "GET",
            "https://api.example.com/v1/expenses",
            params=[("limit", "5")],
            json=None,
            headers=None,
        )

    @pytest.mark.asyncio
    async def test_put_sends_json(self):
        client, session = _client_with(_mock_response(payload={"id": "e1"}))

        await client.put("/v1/expenses/card/e1", json={"memo": "lunch"})

        args, kwargs = session.request.call_args
        assert args[0] == "PUT"
        assert kwargs["json"] == {"memo": "lunch"}

    @pytest.mark.asyncio
    async def test_no_content_returns_none(self):
        client, _ = _client_with(_mock_response(status=204))
        assert await client.get("/x") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_errors(self, status):
        client, _ = _client_with(_mock_response(status=status, text="unauthorized"))

        with pytest.raises(AuthenticationError) as exc_info:
            await client.get("/v1/expenses")

        assert exc_info.value.status_code == status
        assert "BREX_API_KEY" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_not_found(self):
        client, _ = _client_with(_mock_response(status=404, text="missing"))

        with pytest.raises(NotFoundError) as exc_info:
            await client.get("/v1/expenses/nope")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_rate_limit_reads_retry_after(self):
        client, _ = _client_with(_mock_response(status=429, headers={"Retry-After": "12"}))

        with pytest.raises(RateLimitError) as exc_info:
            await client.get("/v1/expenses")
        assert exc_info.value.retry_after == 12

    @pytest.mark.asyncio
    async def test_rate_limit_default_retry_after(self):
        client, _ = _client_with(_mock_response(status=429))

        with pytest.raises(RateLimitError) as exc_info:
            await client.get("/v1/expenses")
        assert exc_info.value.retry_after == 60

    @pytest.mark.asyncio
    async def test_server_error(self):
        client, _ = _client_with(_mock_response(status=502, text="bad gateway"))

        with pytest.raises(UpstreamError) as exc_info:
            await client.get("/v1/expenses")
        assert exc_info.value.status_code == 502
        assert "bad gateway" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        client, _ = _client_with(_mock_response(json_error=ValueError("bad json")))

        with pytest.raises(UpstreamError, match="Malformed JSON"):
            await client.get("/v1/expenses")

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        client = HTTPClient(base_url="https://api.example.com")
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))
        client._session = session

        with pytest.raises(UpstreamError) as exc_info:
            await client.get("/v1/expenses")
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = HTTPClient(base_url="https://api.example.com")
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=asyncio.TimeoutError())
        client._session = session

        with pytest.raises(UpstreamError, match="TimeoutError"):
            await client.get("/v1/expenses")


class TestHTTPClientResponseHooks:
    """Test response hooks."""

    @pytest.mark.asyncio
    async def test_hooks_called(self):
        response = _mock_response(payload={})
        client, _ = _client_with(response)
        sync_hook = MagicMock(return_value=None)
        async_hook = AsyncMock()
        client.add_response_hook(sync_hook)
        client.add_response_hook(async_hook)

        await client.get("/x")

        sync_hook.assert_called_once_with(response)
        async_hook.assert_awaited_once_with(response)

    @pytest.mark.asyncio
    async def test_hook_failure_does_not_fail_request(self):
        client, _ = _client_with(_mock_response(payload={"ok": True}))
        client.add_response_hook(MagicMock(side_effect=RuntimeError("hook broke")))

        assert await client.get("/x") == {"ok": True}
