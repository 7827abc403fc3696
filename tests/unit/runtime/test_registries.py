"""Unit tests for the entity and operation registries."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from spendkit.brex.core import (
    EntityKind,
    RegistryError,
    UnknownEntityError,
    UnknownOperationError,
    ValidationError,
)
from spendkit.brex.runtime import EntityDefinition, EntityRegistry, OperationRegistry


class EchoRequest(BaseModel):
    value: int = Field(..., ge=0)


async def echo_handler(request: EchoRequest) -> dict:
    return {"value": request.value}


class TestEntityRegistry:
    """Test EntityRegistry lookups."""

    def test_register_and_get(self):
        definition = EntityDefinition(kind=EntityKind.BUDGET, items_key="budgets", item_key="budget")
        registry = EntityRegistry([definition])

        assert registry.get(EntityKind.BUDGET) is definition
        assert registry.get("budget") is definition
        assert EntityKind.BUDGET in registry
        assert len(registry) == 1

    def test_duplicate_rejected(self):
        definition = EntityDefinition(kind=EntityKind.BUDGET, items_key="budgets", item_key="budget")
        registry = EntityRegistry([definition])

        with pytest.raises(RegistryError, match="already registered"):
            registry.register(definition)

    def test_unknown_kind(self):
        registry = EntityRegistry()

        with pytest.raises(UnknownEntityError):
            registry.get(EntityKind.EXPENSE)
        with pytest.raises(UnknownEntityError):
            registry.get("not_a_kind")
        assert "not_a_kind" not in registry

    def test_instances_are_isolated(self):
        first = EntityRegistry()
        second = EntityRegistry()
        first.register(
            EntityDefinition(kind=EntityKind.BUDGET, items_key="budgets", item_key="budget")
        )

        assert len(second) == 0

    def test_definition_without_list_spec(self):
        definition = EntityDefinition(kind=EntityKind.BUDGET, items_key="budgets", item_key="budget")

        assert definition.supports_windows is False
        assert definition.client_end_path is None


class TestOperationRegistry:
    """Test OperationRegistry dispatch."""

    @pytest.fixture
    def registry(self):
        registry = OperationRegistry()
        registry.register("echo", EchoRequest, echo_handler, description="Echo a value")
        return registry

    @pytest.mark.asyncio
    async def test_dispatch(self, registry):
        assert await registry.dispatch("echo", {"value": 3}) == {"value": 3}

    @pytest.mark.asyncio
    async def test_unknown_operation(self, registry):
        with pytest.raises(UnknownOperationError, match="nope"):
            await registry.dispatch("nope", {})

    @pytest.mark.asyncio
    async def test_validation_error_converted(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            await registry.dispatch("echo", {"value": -1})

        assert exc_info.value.field == "value"
        assert str(exc_info.value).startswith("Invalid parameters: value:")

    @pytest.mark.asyncio
    async def test_handler_not_called_on_invalid_input(self):
        calls = []

        async def handler(request):
            calls.append(request)

        registry = OperationRegistry()
        registry.register("echo", EchoRequest, handler)

        with pytest.raises(ValidationError):
            await registry.dispatch("echo", {})
        assert calls == []

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self):
        async def handler(request):
            raise RuntimeError("handler broke")

        registry = OperationRegistry()
        registry.register("echo", EchoRequest, handler)

        with pytest.raises(RuntimeError, match="handler broke"):
            await registry.dispatch("echo", {"value": 1})

    def test_duplicate_rejected(self, registry):
        with pytest.raises(RegistryError):
            registry.register("echo", EchoRequest, echo_handler)

    def test_introspection(self, registry):
        assert "echo" in registry
        assert registry.names() == ["echo"]
        assert registry.get("echo").description == "Echo a value"

    def test_instances_are_isolated(self, registry):
        assert len(OperationRegistry()) == 0
        assert len(registry) == 1
