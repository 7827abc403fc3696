"""Field projection by dot-separated paths.

A projection extracts a sparse copy of a source mapping. Each path such as
``"purchased_amount.amount"`` addresses nested object keys; positional array
indexing is not supported. Paths that do not fully resolve are skipped, so a
projection never invents a key that is missing from the source. A key that is
present with a ``None`` value is copied as ``None``.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

_MISSING = object()


def resolve_path(source: Any, path: str) -> Any:
    """Walk ``path`` through nested mappings.

    Args:
        source: Object to read from
        path: Dot-separated key path

    Returns:
        The resolved value (``None`` included when the leaf is present and
        null), or the module sentinel ``_MISSING`` when a segment is absent or
        an intermediate value is ``None`` or not a mapping
    """
    current = source
    for segment in path.split("."):
        if not isinstance(current, Mapping):
            return _MISSING
        current = current.get(segment, _MISSING)
        if current is _MISSING:
            return _MISSING
    return current


def get_path(source: Any, path: str, default: Any = None) -> Any:
    """Return the value at ``path`` or ``default`` when it does not resolve."""
    value = resolve_path(source, path)
    return default if value is _MISSING else value


def project(source: Mapping[str, Any], paths: Iterable[str]) -> dict[str, Any]:
    """Extract the requested paths from ``source`` into a new nested dict.

    Args:
        source: Source mapping (left unmodified)
        paths: Dot-separated paths to retain

    Returns:
        Sparse dict whose key-paths are the requested paths present in source
    """
    out: dict[str, Any] = {}
    for path in paths:
        if not path:
            continue
        value = resolve_path(source, path)
        if value is _MISSING:
            continue

        *parents, leaf = path.split(".")
        target = out
        for key in parents:
            child = target.get(key)
            if not isinstance(child, dict):
                child = {}
                target[key] = child
            target = child
        target[leaf] = copy.deepcopy(value) if isinstance(value, (Mapping, list)) else value
    return out


def project_many(items: Iterable[Mapping[str, Any]], paths: list[str]) -> list[dict[str, Any]]:
    """Project every item with the same path list."""
    return [project(item, paths) for item in items]
