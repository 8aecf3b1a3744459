"""Tests for consistency, weekly deltas, volatility and time-of-day stats."""

from __future__ import annotations

from datetime import date

import pytest

from weightdash.tracking.clock import FixedClock
from weightdash.tracking.consistency import (
    calculate_consistency_stats,
    calculate_time_of_day_stats,
    calculate_volatility_stats,
    calculate_weekly_deltas,
    time_of_day_period,
)
from weightdash.tracking.models import WeightEntry


class TestConsistencyStats:
    """Tests for calculate_consistency_stats."""

    def test_twenty_of_thirty_days(self, make_series) -> None:
        clock = FixedClock.on(date(2025, 1, 30))
        stats = calculate_consistency_stats(make_series([80.0] * 20), "2025-01-01", clock=clock)

        assert stats.tracked_days == 20
        assert stats.total_days == 30
        assert stats.consistency_percent == pytest.approx(66.67, abs=0.01)
        assert stats.longest_gap == 0

    def test_longest_gap(self) -> None:
        entries = [WeightEntry("2025-01-01", 80.0), WeightEntry("2025-01-05", 79.0)]
        stats = calculate_consistency_stats(entries, "2025-01-01", clock=FixedClock.on(date(2025, 1, 5)))
        assert stats.longest_gap == 3

    def test_start_falls_back_to_first_entry(self, make_series) -> None:
        clock = FixedClock.on(date(2025, 1, 10))
        stats = calculate_consistency_stats(make_series([80.0] * 5, start=date(2025, 1, 6)), None, clock=clock)
        assert stats.total_days == 5
        assert stats.consistency_percent == pytest.approx(100.0)

    def test_no_entries(self, clock) -> None:
        stats = calculate_consistency_stats([], None, clock=clock)
        assert stats.total_days == 1
        assert stats.tracked_days == 0


class TestWeeklyDeltas:
    """Tests for calculate_weekly_deltas."""

    def test_groups_by_sunday_week(self) -> None:
        entries = [
            WeightEntry("2025-01-05", 100.0),
            WeightEntry("2025-01-07", 99.0),
            WeightEntry("2025-01-11", 98.5),
            WeightEntry("2025-01-12", 98.0),
        ]
        deltas = calculate_weekly_deltas(entries)

        assert [d.week_start for d in deltas] == ["2025-01-05", "2025-01-12"]
        assert deltas[0].week_end == "2025-01-11"
        assert deltas[0].label == "Jan 05"
        assert deltas[0].change_kg == pytest.approx(1.5)
        assert deltas[1].change_kg == 0.0

    def test_needs_two_entries(self) -> None:
        assert calculate_weekly_deltas([WeightEntry("2025-01-05", 100.0)]) == []


class TestVolatilityStats:
    """Tests for calculate_volatility_stats."""

    def test_changes_normalized_per_day(self) -> None:
        entries = [
            WeightEntry("2025-01-01", 100.0),
            WeightEntry("2025-01-02", 99.0),
            WeightEntry("2025-01-04", 98.0),
        ]
        stats = calculate_volatility_stats(entries)

        assert stats.average_daily_change == pytest.approx(0.75)
        assert stats.std_dev_daily_change == pytest.approx(0.25)
        assert stats.average_absolute_change == pytest.approx(0.75)

    def test_single_entry(self) -> None:
        stats = calculate_volatility_stats([WeightEntry("2025-01-01", 100.0)])
        assert stats.average_daily_change == 0.0
        assert stats.std_dev_daily_change == 0.0


class TestTimeOfDay:
    """Tests for time-of-day statistics."""

    @pytest.mark.parametrize(
        "hour, period",
        [(5, "morning"), (10, "morning"), (11, "afternoon"), (16, "evening"), (22, "night"), (3, "night")],
    )
    def test_periods(self, hour: int, period: str) -> None:
        assert time_of_day_period(hour) == period

    def test_dominant_period(self) -> None:
        entries = [
            WeightEntry("2025-01-01", 80.0, recorded_at="2025-01-01T07:00"),
            WeightEntry("2025-01-02", 81.0, recorded_at="2025-01-02T08:00"),
            WeightEntry("2025-01-03", 82.0, recorded_at="2025-01-03T06:30"),
            WeightEntry("2025-01-04", 83.0, recorded_at="2025-01-04T20:00"),
            WeightEntry("2025-01-05", 84.0),
        ]
        stats = calculate_time_of_day_stats(entries)

        assert stats.dominant_period == "morning"
        assert stats.morning_avg == pytest.approx(81.0)
        assert stats.evening_avg == pytest.approx(83.0)
        assert stats.afternoon_avg is None
        assert stats.night_avg is None

    def test_mixed_when_no_period_has_three(self) -> None:
        entries = [
            WeightEntry("2025-01-01", 80.0, recorded_at="2025-01-01T07:00"),
            WeightEntry("2025-01-02", 81.0, recorded_at="2025-01-02T13:00"),
        ]
        assert calculate_time_of_day_stats(entries).dominant_period == "mixed"
