"""Client-side predicates for filters the upstream query interface lacks.

Filters run per page, after shape validation and before items count toward
the caller's cap. Numeric thresholds are inclusive and exclude items that
lack a numeric value at the path rather than treating them as zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from ..shaping.projection import get_path


@dataclass(frozen=True)
class TextPredicate:
    """Case-insensitive text match on a nested string field."""

    path: str
    value: str


@dataclass(frozen=True)
class ThresholdPredicate:
    """Inclusive numeric bound on a nested numeric field."""

    path: str
    value: float


@dataclass(frozen=True)
class BeforePredicate:
    """Exclusive upper bound on a nested ISO-8601 timestamp field."""

    path: str
    value: datetime


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _as_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class ItemFilter:
    """Conjunction of optional client-side predicates.

    Attributes:
        substring: Case-insensitive containment check
        equals: Case-insensitive equality check
        minimum: Inclusive lower numeric bound
        maximum: Inclusive upper numeric bound
        before: Exclusive timestamp upper bound
    """

    substring: TextPredicate | None = None
    equals: TextPredicate | None = None
    minimum: ThresholdPredicate | None = None
    maximum: ThresholdPredicate | None = None
    before: BeforePredicate | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            p is None
            for p in (self.substring, self.equals, self.minimum, self.maximum, self.before)
        )

    def with_before(self, path: str, value: datetime) -> ItemFilter:
        """Copy of this filter with a timestamp upper bound added."""
        return replace(self, before=BeforePredicate(path=path, value=value))

    def matches(self, item: Any) -> bool:
        """Return True if ``item`` satisfies every configured predicate."""
        if self.substring is not None:
            text = get_path(item, self.substring.path)
            if not isinstance(text, str) or self.substring.value.lower() not in text.lower():
                return False

        if self.equals is not None:
            text = get_path(item, self.equals.path)
            if not isinstance(text, str) or text.lower() != self.equals.value.lower():
                return False

        if self.minimum is not None:
            number = _as_number(get_path(item, self.minimum.path))
            if number is None or number < self.minimum.value:
                return False

        if self.maximum is not None:
            number = _as_number(get_path(item, self.maximum.path))
            if number is None or number > self.maximum.value:
                return False

        if self.before is not None:
            stamp = _as_datetime(get_path(item, self.before.path))
            bound = self.before.value
            if bound.tzinfo is None:
                bound = bound.replace(tzinfo=UTC)
            if stamp is None or stamp >= bound:
                return False

        return True

    def apply(self, items: Iterable[Any]) -> list[Any]:
        """Return the items that satisfy every predicate, in order."""
        if self.is_empty:
            return list(items)
        return [item for item in items if self.matches(item)]
