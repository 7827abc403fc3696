"""Spendkit Brex - adaptive response shaping and windowed pagination over the Brex API."""

from .api import BrexAPI, build_operation_registry
from .connectors.brex import BrexRESTConnector, build_entity_registry
from .core import (
    AccountStatus,
    AuthenticationError,
    BrexSettings,
    BrexToolError,
    EntityKind,
    ExpensePaymentStatus,
    ExpenseStatus,
    ExpenseType,
    NotFoundError,
    RateLimitError,
    RegistryError,
    UnknownEntityError,
    UnknownOperationError,
    UpstreamError,
    ValidationError,
    load_settings,
)
from .runtime import CollectionEngine, EntityDefinition, EntityRegistry, OperationRegistry
from .runtime.shaping import ResponseShaper

__version__ = "0.1.0"

__all__ = [
    # API
    "BrexAPI",
    "build_operation_registry",
    # Connector
    "BrexRESTConnector",
    "build_entity_registry",
    # Runtime
    "CollectionEngine",
    "EntityDefinition",
    "EntityRegistry",
    "OperationRegistry",
    "ResponseShaper",
    # Settings
    "BrexSettings",
    "load_settings",
    # Enums
    "EntityKind",
    "ExpenseType",
    "ExpenseStatus",
    "ExpensePaymentStatus",
    "AccountStatus",
    # Exceptions
    "BrexToolError",
    "ValidationError",
    "UpstreamError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "RegistryError",
    "UnknownOperationError",
    "UnknownEntityError",
]
