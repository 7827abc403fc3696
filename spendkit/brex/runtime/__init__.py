"""Runtime layer: registries, engine, paging, shaping and REST plumbing.

Architecture:
    - entity_registry.py: Entity kind -> endpoint definition
    - engine.py: Generic list/get pipeline
    - operations.py: Named operations with typed requests
    - paging/: Window planning and cursor collection
    - shaping/: Size estimation, projection and summary policy
    - rest/: aiohttp client, transport and spec runner
"""

from .engine import CollectionEngine, PageSource
from .entity_registry import EntityDefinition, EntityRegistry
from .operations import Operation, OperationRegistry

__all__ = [
    "CollectionEngine",
    "PageSource",
    "EntityDefinition",
    "EntityRegistry",
    "Operation",
    "OperationRegistry",
]
