"""Tracking consistency, weekly deltas, volatility and time-of-day patterns."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Optional

import numpy as np

from weightdash.tracking.clock import Clock, resolve_clock
from weightdash.tracking.dates import (
    days_between,
    parse_date_flexible,
    parsed_entries,
    start_of_week,
)
from weightdash.tracking.models import WeightEntry

# Local-hour windows, [start, end). Anything else is night (22:00-05:00).
TIME_OF_DAY_PERIODS = (
    ("morning", 5, 11),
    ("afternoon", 11, 16),
    ("evening", 16, 22),
)
MIN_DOMINANT_ENTRIES = 3


@dataclass
class ConsistencyStats:
    tracked_days: int
    total_days: int
    consistency_percent: float
    longest_gap: int  # fully missed days between two logged days


@dataclass
class WeeklyDelta:
    week_start: str
    week_end: str
    label: str
    change_kg: float  # first weight of the week minus last


@dataclass
class VolatilityStats:
    average_daily_change: float
    std_dev_daily_change: float
    average_absolute_change: float


@dataclass
class TimeOfDayStats:
    morning_avg: Optional[float]
    afternoon_avg: Optional[float]
    evening_avg: Optional[float]
    night_avg: Optional[float]
    dominant_period: str  # a period name or 'mixed'


def calculate_consistency_stats(
    entries: Iterable[WeightEntry],
    start_date: Any,
    clock: Optional[Clock] = None,
) -> ConsistencyStats:
    """Measure how regularly weight has been logged since ``start_date``.

    Args:
        entries: Weight entries in any order
        start_date: Tracking start; falls back to the earliest entry, then today
        clock: Source of "today"

    Returns:
        ConsistencyStats
    """
    entries = list(entries)
    now = resolve_clock(clock).now()
    pairs = parsed_entries(entries)

    start = parse_date_flexible(start_date)
    if start is None:
        start = pairs[0][0] if pairs else now

    total_days = max(1, days_between(start, now) + 1)
    tracked_days = len(entries)

    longest_gap = 0
    for (previous_dt, _), (current_dt, _) in zip(pairs, pairs[1:]):
        gap = max(0, days_between(previous_dt, current_dt) - 1)
        longest_gap = max(longest_gap, gap)

    return ConsistencyStats(
        tracked_days=tracked_days,
        total_days=total_days,
        consistency_percent=tracked_days / total_days * 100,
        longest_gap=longest_gap,
    )


def calculate_weekly_deltas(entries: Iterable[WeightEntry]) -> list[WeeklyDelta]:
    """Weight change within each Sunday-start calendar week.

    A week with a single entry reports a change of 0.
    """
    pairs = parsed_entries(entries)
    if len(pairs) < 2:
        return []

    weeks: dict[date, list[float]] = {}
    for entry_dt, entry in pairs:
        week_start = start_of_week(entry_dt.date())
        if week_start not in weeks:
            weeks[week_start] = [entry.weight, entry.weight]
        else:
            weeks[week_start][1] = entry.weight

    return [
        WeeklyDelta(
            week_start=week_start.isoformat(),
            week_end=(week_start + timedelta(days=6)).isoformat(),
            label=week_start.strftime("%b %d"),
            change_kg=start_weight - end_weight,
        )
        for week_start, (start_weight, end_weight) in weeks.items()
    ]


def daily_changes(entries: Iterable[WeightEntry]) -> np.ndarray:
    """Per-pair weight loss normalized by days between entries (at least 1)."""
    pairs = parsed_entries(entries)
    changes = [
        (previous.weight - current.weight) / max(1, days_between(previous_dt, current_dt))
        for (previous_dt, previous), (current_dt, current) in zip(pairs, pairs[1:])
    ]
    return np.array(changes, dtype=float)


def calculate_volatility_stats(entries: Iterable[WeightEntry]) -> VolatilityStats:
    """Mean, population standard deviation and mean absolute daily change.

    Changes are loss-positive. Fewer than two entries yield all zeros.
    """
    changes = daily_changes(entries)
    if len(changes) == 0:
        return VolatilityStats(
            average_daily_change=0.0,
            std_dev_daily_change=0.0,
            average_absolute_change=0.0,
        )

    return VolatilityStats(
        average_daily_change=float(np.mean(changes)),
        std_dev_daily_change=float(np.std(changes)),
        average_absolute_change=float(np.mean(np.abs(changes))),
    )


def time_of_day_period(hour: int) -> str:
    """Return the period name for a local hour."""
    for name, start, end in TIME_OF_DAY_PERIODS:
        if start <= hour < end:
            return name
    return "night"


def calculate_time_of_day_stats(entries: Iterable[WeightEntry]) -> TimeOfDayStats:
    """Average weight per time-of-day period.

    Only entries with a parseable ``recorded_at`` take part; legacy entries
    without a time are not assigned to any period.
    """
    buckets: dict[str, list[float]] = {
        "morning": [],
        "afternoon": [],
        "evening": [],
        "night": [],
    }

    for entry in entries:
        if not entry.recorded_at:
            continue
        recorded = parse_date_flexible(entry.recorded_at)
        if recorded is None:
            continue
        buckets[time_of_day_period(recorded.hour)].append(entry.weight)

    averages = {
        name: float(np.mean(values)) if values else None for name, values in buckets.items()
    }

    # max() keeps the first of equal counts: morning, afternoon, evening, night
    dominant = max(buckets, key=lambda name: len(buckets[name]))
    if len(buckets[dominant]) < MIN_DOMINANT_ENTRIES:
        dominant = "mixed"

    return TimeOfDayStats(
        morning_avg=averages["morning"],
        afternoon_avg=averages["afternoon"],
        evening_avg=averages["evening"],
        night_avg=averages["night"],
        dominant_period=dominant,
    )
