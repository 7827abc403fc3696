"""Payload size estimation.

Size units approximate what a serialized payload costs a context-window
constrained consumer. They are a coarse proxy used only for threshold
comparison, never reported as a precise token count.
"""

from __future__ import annotations

import json
import math
from typing import Any

BYTES_PER_UNIT = 4


def estimate_size(serialized: str) -> int:
    """Estimate the size of a serialized payload.

    Args:
        serialized: Serialized payload text

    Returns:
        ``ceil(utf8_byte_length / 4)``
    """
    return math.ceil(len(serialized.encode("utf-8")) / BYTES_PER_UNIT)


def serialize(value: Any) -> str:
    """Serialize a JSON-compatible value compactly."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def estimate_payload(value: Any) -> int:
    """Serialize ``value`` and estimate its size."""
    return estimate_size(serialize(value))
