"""REST transport: base URL plus default headers over an HTTPClient."""

from __future__ import annotations

from typing import Any

from .http_client import HTTPClient


class RESTTransport:
    """Thin wrapper that merges default headers into every request."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._http = HTTPClient(base_url=base_url, timeout=timeout)
        self._default_headers = dict(default_headers or {})

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str] | None:
        if not self._default_headers:
            return headers
        merged = dict(self._default_headers)
        if headers:
            merged.update(headers)
        return merged

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._http.get(path, params=params, headers=self._headers(headers))

    async def post(
        self,
        path: str,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._http.post(path, json=json_body, headers=self._headers(headers))

    async def put(
        self,
        path: str,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._http.put(path, json=json_body, headers=self._headers(headers))

    async def close(self) -> None:
        await self._http.close()
