"""Entity registry mapping entity kinds to endpoint definitions.

The EntityRegistry is the single place the engine learns how to reach and
shape a given upstream resource: which endpoint lists it, which endpoint
fetches one instance, which fields form its summary, and which item paths
carry its date, amount, descriptor and status.

Architecture:
    - EntityDefinition: Immutable bundle of endpoint specs, adapters and
      item paths for one EntityKind
    - EntityRegistry: Explicit registry object, constructed once and passed
      to whatever needs lookups

Design Decisions:
    - No module-level registry: every caller builds or receives an instance,
      so test registries never leak into each other
    - Duplicate registration is an error rather than a silent override
    - Item paths are optional; a definition without ``amount_path`` simply
      rejects amount thresholds

See Also:
    - connectors.brex.endpoints: Builds the Brex definitions
    - CollectionEngine: Consumes definitions per request
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ..core.enums import EntityKind
from ..core.exceptions import RegistryError, UnknownEntityError
from .rest.runner import ResponseAdapter, RestEndpointSpec


@dataclass(frozen=True)
class EntityDefinition:
    """How one entity kind is fetched, validated, filtered and summarized.

    Attributes:
        kind: Entity kind this definition serves
        items_key: Envelope key for list results (e.g. ``"expenses"``)
        item_key: Envelope key for single-object results (e.g. ``"expense"``)
        list_spec: Endpoint that pages through the collection
        list_adapter: Adapter producing a PageResponse from a list body
        item_spec: Endpoint that fetches one instance by id
        item_adapter: Adapter for the single-object body
        default_fields: Projection used for summaries
        is_valid: Shape predicate; items failing it are discarded
        date_path: Item path of the timestamp windows are applied to
        amount_path: Item path of the numeric amount for thresholds
        descriptor_path: Item path matched by text filters
        status_path: Item path matched by status filters
    """

    kind: EntityKind
    items_key: str
    item_key: str
    list_spec: RestEndpointSpec | None = None
    list_adapter: ResponseAdapter | None = None
    item_spec: RestEndpointSpec | None = None
    item_adapter: ResponseAdapter | None = None
    default_fields: tuple[str, ...] = field(default_factory=tuple)
    is_valid: Callable[[Any], bool] | None = None
    date_path: str | None = None
    amount_path: str | None = None
    descriptor_path: str | None = None
    status_path: str | None = None

    @property
    def start_param(self) -> str | None:
        return self.list_spec.start_param if self.list_spec else None

    @property
    def end_param(self) -> str | None:
        return self.list_spec.end_param if self.list_spec else None

    @property
    def client_end_path(self) -> str | None:
        """Path on which window ends must be enforced client-side, if any."""
        if self.end_param is None and self.date_path is not None:
            return self.date_path
        return None

    @property
    def supports_windows(self) -> bool:
        return self.start_param is not None


class EntityRegistry:
    """Explicit registry of entity definitions keyed by EntityKind."""

    def __init__(self, definitions: list[EntityDefinition] | None = None) -> None:
        self._definitions: dict[EntityKind, EntityDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: EntityDefinition) -> None:
        """Register a definition.

        Raises:
            RegistryError: If the kind is already registered
        """
        if definition.kind in self._definitions:
            raise RegistryError(f"Entity kind '{definition.kind.value}' is already registered")
        self._definitions[definition.kind] = definition

    def get(self, kind: EntityKind | str) -> EntityDefinition:
        """Look up a definition.

        Raises:
            UnknownEntityError: If no definition is registered for ``kind``
        """
        try:
            key = EntityKind(kind)
        except ValueError:
            raise UnknownEntityError(str(kind)) from None
        definition = self._definitions.get(key)
        if definition is None:
            raise UnknownEntityError(key.value)
        return definition

    def kinds(self) -> list[EntityKind]:
        return list(self._definitions)

    def __contains__(self, kind: object) -> bool:
        try:
            return EntityKind(kind) in self._definitions
        except ValueError:
            return False

    def __iter__(self) -> Iterator[EntityDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
