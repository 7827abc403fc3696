"""High-level API facade."""

from .brex_api import (
    ITEM_OPERATIONS,
    LIST_OPERATIONS,
    BrexAPI,
    ReadOperation,
    build_engine,
    build_operation_registry,
)

__all__ = [
    "BrexAPI",
    "ReadOperation",
    "LIST_OPERATIONS",
    "ITEM_OPERATIONS",
    "build_engine",
    "build_operation_registry",
]
