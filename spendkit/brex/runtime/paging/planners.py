"""Window planning logic for splitting date ranges.

This module provides the WindowPlanner class that splits a bounded date range
into contiguous, non-overlapping windows of a fixed number of days so each
upstream query stays small.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from ...core.exceptions import ValidationError
from .definitions import Window
from .telemetry import log_window_plan


class WindowPlanner:
    """Plans date windows for windowed collection.

    With ``start``, ``end`` and ``window_days`` all present the planner emits
    windows of ``window_days`` starting at ``start``, each clipped to ``end``.
    The next window starts ``window_days`` after the previous *nominal* start,
    so every window except possibly the last is exactly ``window_days`` long.
    Otherwise the plan is a single window equal to the requested range.
    """

    def __init__(self, endpoint_id: str = "unknown") -> None:
        self._endpoint_id = endpoint_id

    @staticmethod
    def validate(
        start: datetime | None,
        end: datetime | None,
        window_days: int | None,
    ) -> None:
        """Reject inputs that cannot be planned.

        Raises:
            ValidationError: If window_days is not positive or start is after end
        """
        if window_days is not None and window_days <= 0:
            raise ValidationError(
                "Invalid window_days: must be a positive integer", field="window_days"
            )
        if start is not None and end is not None and start > end:
            raise ValidationError("start_date cannot be after end_date", field="start_date")

    def plan(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        window_days: int | None = None,
    ) -> list[Window]:
        """Plan windows for a request.

        Args:
            start: Inclusive range start
            end: Exclusive range end
            window_days: Nominal window length in days

        Returns:
            Ordered list of windows whose union is ``[start, end)``

        Raises:
            ValidationError: If the inputs fail ``validate``
        """
        self.validate(start, end, window_days)

        if start is None or end is None or window_days is None or start == end:
            windows = [Window(start=start, end=end, index=0)]
        else:
            windows = self._plan_windowed(start, end, timedelta(days=window_days))

        log_window_plan(
            endpoint_id=self._endpoint_id,
            total_windows=len(windows),
            window_days=window_days,
            start=start,
            end=end,
        )
        return windows

    def _plan_windowed(self, start: datetime, end: datetime, step: timedelta) -> list[Window]:
        windows: list[Window] = []
        cursor = start
        index = 0
        while cursor < end:
            window_end = min(cursor + step, end)
            windows.append(Window(start=cursor, end=window_end, index=index))
            # Advance from the nominal start, not the clipped end
            cursor = cursor + step
            index += 1
        return windows
