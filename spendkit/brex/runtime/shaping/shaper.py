"""Response shaping: full objects by default, projected summaries when needed.

Architecture:
    The shaper decides, per request, whether the consumer receives complete
    upstream objects or field-projected summaries. The decision order is:

    1. Caller asked for ``summary_only`` -> project.
    2. Full payload estimate fits within ``hard_limit`` -> return unchanged.
    3. Otherwise -> project, regardless of what the caller asked for.

Design Decisions:
    - Completeness is the default; the size ceiling silently overrides caller
      intent instead of failing the request.
    - Projection uses caller ``fields`` when given, else the entity's default
      field set.
    - The single-object variant wraps the item in a one-element list and
      applies the identical rule.

See Also:
    - estimator.estimate_payload: The forcing function
    - projection.project: The projection itself
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .estimator import estimate_payload
from .projection import project_many

logger = logging.getLogger(__name__)

DEFAULT_HARD_LIMIT = 24000


@dataclass(frozen=True)
class ShapingDecision:
    """Outcome of a shaping pass.

    Attributes:
        summary_applied: Whether items were projected
        fields_used: Projection paths used (empty when not applied)
        estimated_size: Size estimate of the full payload (None if not measured)
    """

    summary_applied: bool
    fields_used: tuple[str, ...] = ()
    estimated_size: int | None = None


@dataclass
class ShapedItems:
    """Shaped item list plus the decision that produced it."""

    items: list[Any]
    decision: ShapingDecision = field(default_factory=lambda: ShapingDecision(False))

    @property
    def summary_applied(self) -> bool:
        return self.decision.summary_applied


class ResponseShaper:
    """Applies the summary policy for one entity's default field set."""

    def __init__(
        self,
        default_fields: Sequence[str],
        *,
        hard_limit: int = DEFAULT_HARD_LIMIT,
    ) -> None:
        """Initialize shaper.

        Args:
            default_fields: Projection used when the caller gives no ``fields``
            hard_limit: Size-unit ceiling for unprojected payloads
        """
        if hard_limit <= 0:
            raise ValueError("hard_limit must be positive")
        self._default_fields = tuple(default_fields)
        self._hard_limit = hard_limit

    @property
    def hard_limit(self) -> int:
        return self._hard_limit

    def resolve_fields(self, fields: Sequence[str] | None) -> tuple[str, ...]:
        """Caller fields when non-empty, else the defaults."""
        if fields:
            cleaned = tuple(f.strip() for f in fields if f and f.strip())
            if cleaned:
                return cleaned
        return self._default_fields

    def shape(
        self,
        items: Sequence[Mapping[str, Any]],
        *,
        summary_only: bool = False,
        fields: Sequence[str] | None = None,
    ) -> ShapedItems:
        """Shape a list of items.

        Args:
            items: Complete upstream items
            summary_only: Caller explicitly wants projected items
            fields: Optional caller projection

        Returns:
            ShapedItems with the decision attached
        """
        use_fields = self.resolve_fields(fields)

        if summary_only:
            return ShapedItems(
                items=project_many(items, list(use_fields)),
                decision=ShapingDecision(summary_applied=True, fields_used=use_fields),
            )

        estimated = estimate_payload(list(items))
        if estimated <= self._hard_limit:
            return ShapedItems(
                items=list(items),
                decision=ShapingDecision(summary_applied=False, estimated_size=estimated),
            )

        logger.info(
            "summary_forced",
            extra={
                "estimated_size": estimated,
                "hard_limit": self._hard_limit,
                "item_count": len(items),
            },
        )
        return ShapedItems(
            items=project_many(items, list(use_fields)),
            decision=ShapingDecision(
                summary_applied=True,
                fields_used=use_fields,
                estimated_size=estimated,
            ),
        )

    def shape_one(
        self,
        item: Mapping[str, Any],
        *,
        summary_only: bool = False,
        fields: Sequence[str] | None = None,
    ) -> tuple[Any, ShapingDecision]:
        """Shape a single object with the same policy as ``shape``."""
        shaped = self.shape([item], summary_only=summary_only, fields=fields)
        return shaped.items[0], shaped.decision
