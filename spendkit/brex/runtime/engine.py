"""Collection engine: one request in, one shaped envelope out.

Architecture:
    The engine is the single generic pipeline every read operation runs
    through. For list requests it:

    1. Resolves the EntityDefinition for the requested kind
    2. Checks the request against what the entity supports
    3. Plans date windows (WindowPlanner)
    4. Walks each window's cursor stream (PaginatedCollector) with the
       entity's shape predicate and the request's client-side filters
    5. Shapes the aggregate (ResponseShaper)
    6. Wraps items and metadata in the response envelope

Design Decisions:
    - Capability injection: the engine never talks HTTP. It receives a
      PageSource whose ``fetch_page``/``fetch_one`` it calls, so tests drive
      it with in-memory fakes
    - Per-call state: planners, collectors and shapers are built per request;
      the engine itself holds only configuration
    - Validation first: every check that can reject a request runs before
      the first upstream call

See Also:
    - runtime.paging: Planning and collection
    - runtime.shaping: Summary policy
    - runtime.operations: Named operations that call into the engine
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from ..core.enums import EntityKind
from ..core.exceptions import RegistryError, UpstreamError, ValidationError
from ..models.requests import ItemRequest, ListRequest
from .entity_registry import EntityDefinition, EntityRegistry
from .paging import (
    CollectionPolicy,
    ItemFilter,
    PageRequest,
    PageResponse,
    PaginatedCollector,
    TextPredicate,
    ThresholdPredicate,
    WindowPlanner,
)
from .shaping import DEFAULT_HARD_LIMIT, ResponseShaper


class PageSource(Protocol):
    """Upstream capability the engine depends on."""

    async def fetch_page(self, kind: EntityKind, request: PageRequest) -> PageResponse: ...

    async def fetch_one(
        self,
        kind: EntityKind,
        item_id: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any: ...


class CollectionEngine:
    """Runs list and single-object reads for any registered entity."""

    def __init__(
        self,
        source: PageSource,
        entities: EntityRegistry,
        *,
        hard_limit: int = DEFAULT_HARD_LIMIT,
        default_page_size: int = 50,
        default_max_items: int = 100,
        max_pages: int | None = 50,
    ) -> None:
        """Initialize engine.

        Args:
            source: Upstream page source (usually the Brex connector)
            entities: Entity definitions available to this engine
            hard_limit: Size-unit ceiling before summaries are forced
            default_page_size: Page size when the request gives none
            default_max_items: Item cap when the request gives none
            max_pages: Ceiling on upstream page requests per operation
        """
        self._source = source
        self._entities = entities
        self._hard_limit = hard_limit
        self._default_page_size = default_page_size
        self._default_max_items = default_max_items
        self._max_pages = max_pages

    @property
    def entities(self) -> EntityRegistry:
        return self._entities

    async def list(
        self,
        kind: EntityKind,
        request: ListRequest,
        *,
        single_page: bool = False,
    ) -> dict[str, Any]:
        """Collect, filter and shape a list of entities.

        Args:
            kind: Entity kind to list
            request: Validated list request
            single_page: Default ``max_items`` to the page size instead of the
                configured cap

        Returns:
            Envelope ``{<items_key>: [...], "meta": {...}}``

        Raises:
            ValidationError: If the request asks for something the entity
                cannot do, before any upstream call
            UpstreamError: If any page fetch fails
        """
        definition = self._entities.get(kind)
        if definition.list_spec is None:
            raise RegistryError(f"Entity kind '{definition.kind.value}' cannot be listed")
        self._check_supported(definition, request)

        page_size = request.page_size or self._default_page_size
        max_items = request.max_items or (page_size if single_page else self._default_max_items)
        policy = CollectionPolicy(
            page_size=page_size,
            max_items=max_items,
            max_pages=self._max_pages,
        )

        # Start-only endpoints cannot bound a window upstream, so splitting
        # would rescan the tail once per window. Use one window and enforce
        # the end client-side.
        window_days = request.window_days if definition.end_param is not None else None
        windows = WindowPlanner(endpoint_id=kind.value).plan(
            start=request.start_date,
            end=request.end_date,
            window_days=window_days,
        )

        collector = PaginatedCollector(
            policy,
            is_valid=definition.is_valid,
            item_filter=self._build_filter(definition, request),
            end_date_path=definition.client_end_path,
            endpoint_id=kind.value,
        )

        async def fetch_page(page_request: PageRequest) -> PageResponse:
            return await self._source.fetch_page(kind, page_request)

        result = await collector.collect(
            fetch_page=fetch_page,
            windows=windows,
            filters=request.server_filters(),
            start_cursor=request.cursor,
        )

        shaped = self._shaper(definition).shape(
            result.items,
            summary_only=request.summary_only,
            fields=request.fields,
        )

        meta: dict[str, Any] = {
            "count": len(shaped.items),
            "next_cursor": result.next_cursor,
            "summary_applied": shaped.summary_applied,
            "requested_parameters": request.echo(),
        }
        if result.page_budget_exhausted:
            meta["page_budget_exhausted"] = True
        return {definition.items_key: shaped.items, "meta": meta}

    async def get(self, kind: EntityKind, request: ItemRequest) -> dict[str, Any]:
        """Fetch and shape one entity by id.

        Returns:
            Envelope ``{<item_key>: {...}, "meta": {"summary_applied": bool}}``
        """
        definition = self._entities.get(kind)
        if definition.item_spec is None:
            raise RegistryError(f"Entity kind '{definition.kind.value}' has no single lookup")

        item = await self._source.fetch_one(kind, request.item_id, request.params())
        if not isinstance(item, Mapping):
            raise UpstreamError(
                f"Unexpected {definition.item_key} payload: expected an object, "
                f"got {type(item).__name__}"
            )

        shaped, decision = self._shaper(definition).shape_one(
            item,
            summary_only=request.summary_only,
            fields=request.fields,
        )
        return {definition.item_key: shaped, "meta": {"summary_applied": decision.summary_applied}}

    def _shaper(self, definition: EntityDefinition) -> ResponseShaper:
        return ResponseShaper(definition.default_fields, hard_limit=self._hard_limit)

    @staticmethod
    def _check_supported(definition: EntityDefinition, request: ListRequest) -> None:
        name = definition.items_key
        wants_dates = request.start_date is not None or request.end_date is not None
        if wants_dates and not definition.supports_windows:
            raise ValidationError(f"Date ranges are not supported for {name}", field="start_date")
        wants_amount = request.min_amount is not None or request.max_amount is not None
        if wants_amount and definition.amount_path is None:
            raise ValidationError(f"Amount filters are not supported for {name}", field="min_amount")
        if request.text_filter() and definition.descriptor_path is None:
            raise ValidationError(f"Text filters are not supported for {name}")
        if request.status_filter() and definition.status_path is None:
            raise ValidationError(f"Status filters are not supported for {name}", field="status")

    @staticmethod
    def _build_filter(definition: EntityDefinition, request: ListRequest) -> ItemFilter:
        substring = None
        text = request.text_filter()
        if text and definition.descriptor_path:
            substring = TextPredicate(path=definition.descriptor_path, value=text)

        equals = None
        status = request.status_filter()
        if status and definition.status_path:
            equals = TextPredicate(path=definition.status_path, value=status)

        minimum = maximum = None
        if definition.amount_path:
            if request.min_amount is not None:
                minimum = ThresholdPredicate(path=definition.amount_path, value=request.min_amount)
            if request.max_amount is not None:
                maximum = ThresholdPredicate(path=definition.amount_path, value=request.max_amount)

        return ItemFilter(substring=substring, equals=equals, minimum=minimum, maximum=maximum)
