"""Response shaping layer.

Architecture:
    - estimator.py: Size estimation for serialized payloads
    - projection.py: Sparse extraction by dot-separated field paths
    - shaper.py: Summary policy (explicit request or size-forced)
"""

from __future__ import annotations

from .estimator import estimate_payload, estimate_size, serialize
from .projection import get_path, project, project_many
from .shaper import DEFAULT_HARD_LIMIT, ResponseShaper, ShapedItems, ShapingDecision

__all__ = [
    "estimate_size",
    "estimate_payload",
    "serialize",
    "project",
    "project_many",
    "get_path",
    "ResponseShaper",
    "ShapedItems",
    "ShapingDecision",
    "DEFAULT_HARD_LIMIT",
]
