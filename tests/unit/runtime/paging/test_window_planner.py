"""Unit tests for window planning logic."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from spendkit.brex.core import ValidationError
from spendkit.brex.runtime.paging import Window, WindowPlanner


def _dt(day: int, month: int = 8) -> datetime:
    return datetime(2025, month, day, tzinfo=UTC)


class TestWindowPlanner:
    """Test WindowPlanner functionality."""

    def test_two_week_range_with_weekly_windows(self):
        """A 14 day range with window_days=7 yields two contiguous windows."""
        windows = WindowPlanner().plan(start=_dt(1), end=_dt(15), window_days=7)

        assert windows == [
            Window(start=_dt(1), end=_dt(8), index=0),
            Window(start=_dt(8), end=_dt(15), index=1),
        ]

    def test_last_window_is_clipped(self):
        """Ranges that do not divide evenly end with a shorter window."""
        windows = WindowPlanner().plan(start=_dt(1), end=_dt(11), window_days=7)

        assert len(windows) == 2
        assert windows[0].end - windows[0].start == timedelta(days=7)
        assert windows[1].start == _dt(8)
        assert windows[1].end == _dt(11)

    def test_windows_cover_range_without_gaps(self):
        """Consecutive windows share boundaries and span the whole range."""
        start, end = _dt(1), _dt(30, month=9)
        windows = WindowPlanner().plan(start=start, end=end, window_days=5)

        assert windows[0].start == start
        assert windows[-1].end == end
        for prev, nxt in zip(windows, windows[1:]):
            assert prev.end == nxt.start
        assert [w.index for w in windows] == list(range(len(windows)))

    @pytest.mark.parametrize("window_days", [1, 2, 3, 7, 13, 30, 59, 60, 61, 365])
    @pytest.mark.parametrize(
        ("start", "end"),
        [
            (_dt(1), _dt(30, month=9)),
            (datetime(2025, 8, 1, 6, 30, tzinfo=UTC), datetime(2025, 8, 20, 18, tzinfo=UTC)),
        ],
    )
    def test_coverage_for_any_window_days(self, start, end, window_days):
        """Windows partition [start, end) and only the last may be short."""
        windows = WindowPlanner().plan(start=start, end=end, window_days=window_days)
        step = timedelta(days=window_days)

        assert windows[0].start == start
        assert windows[-1].end == end
        for prev, nxt in zip(windows, windows[1:]):
            assert prev.end == nxt.start
        assert all(w.end - w.start == step for w in windows[:-1])
        assert timedelta(0) < windows[-1].end - windows[-1].start <= step
        assert len(windows) == -(-(end - start) // step)
        assert [w.index for w in windows] == list(range(len(windows)))

    def test_window_longer_than_range(self):
        """A window_days larger than the range gives a single clipped window."""
        windows = WindowPlanner().plan(start=_dt(1), end=_dt(3), window_days=30)

        assert windows == [Window(start=_dt(1), end=_dt(3), index=0)]

    def test_no_window_days_gives_single_window(self):
        """Without window_days the range is requested as one window."""
        windows = WindowPlanner().plan(start=_dt(1), end=_dt(15))

        assert windows == [Window(start=_dt(1), end=_dt(15), index=0)]

    def test_window_days_without_dates_is_ignored(self):
        """window_days alone cannot be planned and falls back to one open window."""
        windows = WindowPlanner().plan(window_days=7)

        assert len(windows) == 1
        assert not windows[0].is_bounded

    def test_open_ended_range(self):
        """Only a start bound gives one half-open window."""
        windows = WindowPlanner().plan(start=_dt(1), window_days=7)

        assert windows == [Window(start=_dt(1), end=None, index=0)]

    def test_equal_start_and_end(self):
        """An empty range still yields one window."""
        windows = WindowPlanner().plan(start=_dt(1), end=_dt(1), window_days=7)

        assert len(windows) == 1

    def test_start_after_end_rejected(self):
        """start > end is a validation error."""
        with pytest.raises(ValidationError, match="start_date cannot be after end_date"):
            WindowPlanner().plan(start=_dt(15), end=_dt(1), window_days=7)

    @pytest.mark.parametrize("window_days", [0, -3])
    def test_non_positive_window_days_rejected(self, window_days):
        """window_days must be positive."""
        with pytest.raises(ValidationError) as exc_info:
            WindowPlanner().plan(start=_dt(1), end=_dt(15), window_days=window_days)
        assert exc_info.value.field == "window_days"

    def test_describe(self):
        """Window.describe renders open bounds as 'none'."""
        assert Window(start=_dt(1)).describe() == f"{_dt(1).isoformat()}..none"
