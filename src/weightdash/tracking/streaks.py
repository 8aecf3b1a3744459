"""Logging streak: consecutive calendar days with at least one entry.

This is not the weight-loss streak reported in the statistics snapshot,
which counts consecutive entries with a falling weight.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from weightdash.tracking.clock import Clock, today
from weightdash.tracking.dates import parse_date_flexible
from weightdash.tracking.models import WeightEntry


def get_unique_entry_days(entries: Iterable[WeightEntry]) -> set[date]:
    """Calendar days with at least one entry, from ``date`` or ``recorded_at``."""
    days: set[date] = set()
    for entry in entries:
        source = entry.date or entry.recorded_at
        parsed = parse_date_flexible(source)
        if parsed is not None:
            days.add(parsed.date())
    return days


def calculate_entry_streak(
    entries: Iterable[WeightEntry],
    clock: Optional[Clock] = None,
) -> int:
    """
    Count consecutive logged days ending at the most recent logged day.

    The streak is broken (0) when the latest logged day is more than one day
    before today; logging yesterday but not yet today keeps it alive.

    Args:
        entries: Weight entries in any order
        clock: Source of "today"

    Returns:
        Streak length in days
    """
    days = get_unique_entry_days(entries)
    if not days:
        return 0

    latest = max(days)
    if (today(clock) - latest).days > 1:
        return 0

    streak = 0
    check = latest
    while check in days:
        streak += 1
        check -= timedelta(days=1)
    return streak
