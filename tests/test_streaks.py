"""Tests for the logging streak."""

from __future__ import annotations

from weightdash.tracking.models import WeightEntry
from weightdash.tracking.streaks import calculate_entry_streak, get_unique_entry_days


def _entries(*days: str) -> list[WeightEntry]:
    return [WeightEntry(day, 80.0) for day in days]


class TestEntryStreak:
    """Tests for calculate_entry_streak (clock fixed on 2025-03-01)."""

    def test_yesterday_and_today(self, clock) -> None:
        assert calculate_entry_streak(_entries("2025-02-28", "2025-03-01"), clock=clock) == 2

    def test_yesterday_keeps_streak_alive(self, clock) -> None:
        assert calculate_entry_streak(_entries("2025-02-27", "2025-02-28"), clock=clock) == 2

    def test_two_day_gap_breaks_streak(self, clock) -> None:
        assert calculate_entry_streak(_entries("2025-02-26", "2025-02-27"), clock=clock) == 0

    def test_stops_at_first_missing_day(self, clock) -> None:
        entries = _entries("2025-02-25", "2025-02-26", "2025-02-28", "2025-03-01")
        assert calculate_entry_streak(entries, clock=clock) == 2

    def test_duplicate_days_count_once(self, clock) -> None:
        entries = _entries("2025-03-01", "01.03.2025", "2025-02-28")
        assert calculate_entry_streak(entries, clock=clock) == 2

    def test_empty(self, clock) -> None:
        assert calculate_entry_streak([], clock=clock) == 0


class TestUniqueEntryDays:
    """Tests for get_unique_entry_days."""

    def test_falls_back_to_recorded_at(self) -> None:
        entries = [WeightEntry("", 80.0, recorded_at="2025-01-02T07:00"), WeightEntry("bogus", 80.0)]
        days = get_unique_entry_days(entries)
        assert len(days) == 1
        assert next(iter(days)).isoformat() == "2025-01-02"
