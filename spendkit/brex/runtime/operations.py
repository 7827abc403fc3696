"""Operation registry: named operations with typed request models.

Architecture:
    An Operation pairs a name with the pydantic model its arguments are
    validated into and the async handler that serves it. The
    OperationRegistry is an explicit object constructed once (see
    ``api.build_operation_registry``) and handed to whatever dispatches
    requests, such as the MCP server.

Design Decisions:
    - Validation happens exactly once, in ``dispatch``; handlers receive a
      typed request and never see the raw argument mapping
    - Pydantic validation failures are converted to the library's
      ValidationError so callers handle one error taxonomy
    - Registering a name twice is an error

See Also:
    - models.requests: Request models
    - runtime.engine.CollectionEngine: What most handlers call
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from time import perf_counter
from typing import Any

import pydantic
from pydantic import BaseModel

from ..core.exceptions import RegistryError, UnknownOperationError, ValidationError

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class Operation:
    """Registered operation metadata."""

    name: str
    request_model: type[BaseModel]
    handler: Handler
    description: str = ""


def _convert_validation_error(error: pydantic.ValidationError) -> ValidationError:
    parts: list[str] = []
    first_field: str | None = None
    for detail in error.errors():
        loc = ".".join(str(p) for p in detail.get("loc", ()) if p != "__root__")
        if first_field is None and loc:
            first_field = loc
        msg = detail.get("msg", "invalid value")
        # Model-level validators report "Value error, <message>"
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, ") :]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return ValidationError("Invalid parameters: " + "; ".join(parts), field=first_field)


class OperationRegistry:
    """Explicit registry of named operations."""

    def __init__(self) -> None:
        self._operations: dict[str, Operation] = {}

    def register(
        self,
        name: str,
        request_model: type[BaseModel],
        handler: Handler,
        *,
        description: str = "",
    ) -> None:
        """Register an operation.

        Raises:
            RegistryError: If the name is already registered
        """
        if name in self._operations:
            raise RegistryError(f"Operation '{name}' is already registered")
        self._operations[name] = Operation(
            name=name,
            request_model=request_model,
            handler=handler,
            description=description,
        )

    def get(self, name: str) -> Operation:
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)
        return operation

    def names(self) -> list[str]:
        return sorted(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    def validate(self, name: str, arguments: Mapping[str, Any] | None = None) -> BaseModel:
        """Validate a flat argument mapping into the operation's request model.

        Raises:
            UnknownOperationError: If ``name`` is not registered
            ValidationError: If the arguments do not validate
        """
        operation = self.get(name)
        try:
            return operation.request_model.model_validate(dict(arguments or {}))
        except pydantic.ValidationError as e:
            raise _convert_validation_error(e) from e

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Validate ``arguments`` and run the named operation."""
        operation = self.get(name)
        request = self.validate(name, arguments)

        started = perf_counter()
        try:
            result = await operation.handler(request)
        except Exception as e:
            logger.error(
                "operation_failed",
                extra={
                    "operation": name,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        logger.debug(
            "operation_complete",
            extra={"operation": name, "latency_ms": (perf_counter() - started) * 1000.0},
        )
        return result
