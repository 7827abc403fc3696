"""Async HTTP client wrapper with upstream error classification."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import Enum
from typing import Any

import aiohttp

from ...core.exceptions import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

ResponseHook = Callable[[aiohttp.ClientResponse], Awaitable[None] | None]

# Characters of an error body kept in exception messages
_ERROR_BODY_PREVIEW = 300


def encode_params(params: dict[str, Any] | None) -> list[tuple[str, str]] | None:
    """Flatten a query mapping into aiohttp-compatible pairs.

    None values are dropped, sequences become repeated keys, booleans are
    lowercased and datetimes are ISO-8601 encoded.
    """
    if not params:
        return None
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for v in values:
            if v is None:
                continue
            if isinstance(v, bool):
                pairs.append((key, "true" if v else "false"))
            elif isinstance(v, datetime):
                pairs.append((key, v.isoformat()))
            elif isinstance(v, Enum):
                pairs.append((key, str(v.value)))
            else:
                pairs.append((key, str(v)))
    return pairs or None


class HTTPClient:
    """Async HTTP client wrapper.

    Non-success statuses are raised as ``UpstreamError`` subclasses and
    transport failures as a plain ``UpstreamError`` without a status code.
    Requests are never retried.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._response_hooks: list[ResponseHook] = []

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        """Register a callable invoked with every raw response."""
        self._response_hooks.append(hook)

    def _url(self, url: str) -> str:
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url}{url}"
        return url

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET request."""
        return await self.request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST request."""
        return await self.request("POST", url, json=json, headers=headers)

    async def put(
        self,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """PUT request."""
        return await self.request("PUT", url, json=json, headers=headers)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body.

        Raises:
            AuthenticationError: On 401/403
            NotFoundError: On 404
            RateLimitError: On 429
            UpstreamError: On any other non-success status, transport failure
                or an undecodable body
        """
        full_url = self._url(url)
        query = encode_params(params)
        try:
            async with self.session.request(
                method, full_url, params=query, json=json, headers=headers
            ) as response:
                await self._run_hooks(response)
                if response.status >= 400:
                    text = await response.text()
                    raise self._classify(method, url, response.status, text, response.headers)
                if response.status == 204:
                    return None
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise UpstreamError(
                        f"Malformed JSON from {method} {url}: {e}",
                        status_code=response.status,
                    ) from e
        except UpstreamError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamError(f"{method} {url} failed: {type(e).__name__}: {e}") from e

    async def _run_hooks(self, response: aiohttp.ClientResponse) -> None:
        for hook in self._response_hooks:
            try:
                result = hook(response)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(
                    "response_hook_failed",
                    extra={"error_type": type(e).__name__, "error_message": str(e)},
                )

    @staticmethod
    def _classify(
        method: str,
        url: str,
        status: int,
        body: str,
        headers: Any,
    ) -> UpstreamError:
        preview = body[:_ERROR_BODY_PREVIEW] if body else ""
        message = f"Brex API {method} {url} returned {status}"
        if preview:
            message = f"{message}: {preview}"

        if status in (401, 403):
            return AuthenticationError(message, status_code=status)
        if status == 404:
            return NotFoundError(message)
        if status == 429:
            retry_after = 60
            raw = headers.get("Retry-After") if headers is not None else None
            if raw is not None:
                try:
                    retry_after = max(0, int(float(raw)))
                except (TypeError, ValueError):
                    pass
            return RateLimitError(message, retry_after=retry_after)
        return UpstreamError(message, status_code=status)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
