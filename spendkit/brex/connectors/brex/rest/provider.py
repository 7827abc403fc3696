"""Brex REST connector.

This connector is the engine's PageSource: it turns a PageRequest for an
entity kind into one upstream call and returns a PageResponse.

Architecture:
    The connector looks up the EntityDefinition for the requested kind, takes
    its endpoint spec and adapter, and executes them with RestRunner over an
    authenticated RESTTransport. It holds the aiohttp session, so use it as an
    async context manager (or call ``close``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from spendkit.brex.connectors.brex.config import BASE_URL
from spendkit.brex.core import AuthenticationError, EntityKind, UpstreamError
from spendkit.brex.runtime.entity_registry import EntityRegistry
from spendkit.brex.runtime.paging import PageRequest, PageResponse
from spendkit.brex.runtime.rest import RestRunner, RESTTransport

from .endpoints import build_entity_registry, get_endpoint_adapter, get_endpoint_spec


class BrexRESTConnector:
    """Brex REST connector.

    Serves list pages and single objects for every registered entity kind
    and the card expense update.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        entities: EntityRegistry | None = None,
    ) -> None:
        """Initialize Brex REST connector.

        Args:
            api_key: Brex user token; requests fail with AuthenticationError
                when it is missing
            base_url: API base URL
            timeout: Total request timeout in seconds
            entities: Entity definitions (defaults to all Brex entities)
        """
        self._api_key = api_key
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._transport = RESTTransport(base_url, timeout=timeout, default_headers=headers)
        self._runner = RestRunner(self._transport)
        self._entities = entities or build_entity_registry()

    @property
    def entities(self) -> EntityRegistry:
        return self._entities

    def _require_credentials(self) -> None:
        if not self._api_key:
            raise AuthenticationError("Brex API key is not configured", status_code=None)

    async def fetch(self, endpoint_id: str, params: dict[str, Any]) -> Any:
        """Fetch data from a Brex REST endpoint by ID.

        Raises:
            ValueError: If endpoint_id is not found in registry
        """
        spec = get_endpoint_spec(endpoint_id)
        if spec is None:
            raise ValueError(f"Unknown REST endpoint: {endpoint_id}")
        adapter_cls = get_endpoint_adapter(endpoint_id)
        if adapter_cls is None:
            raise ValueError(f"No adapter found for endpoint: {endpoint_id}")

        self._require_credentials()
        params = {**params, "endpoint_id": endpoint_id}
        return await self._runner.run(spec=spec, adapter=adapter_cls(), params=params)

    async def fetch_page(self, kind: EntityKind, request: PageRequest) -> PageResponse:
        """Fetch one list page for an entity kind."""
        definition = self._entities.get(kind)
        if definition.list_spec is None or definition.list_adapter is None:
            raise ValueError(f"Entity kind '{definition.kind.value}' has no list endpoint")

        self._require_credentials()
        params: dict[str, Any] = {
            **request.filters,
            "endpoint_id": definition.list_spec.id,
            "limit": request.limit,
            "cursor": request.cursor,
            "window_start": request.window.start,
            "window_end": request.window.end,
        }
        page = await self._runner.run(
            spec=definition.list_spec,
            adapter=definition.list_adapter,
            params=params,
        )
        if not isinstance(page, PageResponse):
            raise UpstreamError(f"Adapter for {definition.list_spec.id} did not return a page")
        return page

    async def fetch_one(
        self,
        kind: EntityKind,
        item_id: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Fetch one object of an entity kind by ID."""
        definition = self._entities.get(kind)
        if definition.item_spec is None or definition.item_adapter is None:
            raise ValueError(f"Entity kind '{definition.kind.value}' has no item endpoint")

        self._require_credentials()
        run_params: dict[str, Any] = {
            **(params or {}),
            "endpoint_id": definition.item_spec.id,
            "item_id": item_id,
        }
        return await self._runner.run(
            spec=definition.item_spec,
            adapter=definition.item_adapter,
            params=run_params,
        )

    async def update_card_expense(self, expense_id: str, body: Mapping[str, Any]) -> Any:
        """Update a card expense (``PUT /v1/expenses/card/{id}``)."""
        return await self.fetch(
            "update_card_expense",
            {"item_id": expense_id, "body": dict(body)},
        )

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> BrexRESTConnector:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
