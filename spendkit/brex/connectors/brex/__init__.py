"""Brex connector implementation."""

from .rest.endpoints import build_entity_registry
from .rest.provider import BrexRESTConnector

__all__ = [
    "BrexRESTConnector",
    "build_entity_registry",
]
