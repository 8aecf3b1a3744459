"""Date-range filtering and period-over-period comparison."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable

from weightdash.tracking.dates import parse_date_flexible, parsed_entries, start_of_week
from weightdash.tracking.models import WeightEntry
from weightdash.tracking.trend import average_daily_loss


@dataclass
class DateRangeFilter:
    start_date: str
    end_date: str


@dataclass
class ComparisonMetric:
    name: str
    current: float
    previous: float
    change: float
    change_percent: float
    unit: str


def filter_by_date_range(
    entries: Iterable[WeightEntry],
    start_date: Any,
    end_date: Any,
) -> list[WeightEntry]:
    """Entries dated within ``[start_date, end_date]``, in chronological order.

    An unparseable bound matches nothing.
    """
    start = parse_date_flexible(start_date)
    end = parse_date_flexible(end_date)
    if start is None or end is None:
        return []
    return [entry for entry_dt, entry in parsed_entries(entries) if start <= entry_dt <= end]


def get_date_range_presets(latest_date: str) -> dict[str, DateRangeFilter]:
    """Common ranges ending at the latest logged day."""
    latest = parse_date_flexible(latest_date)
    if latest is None:
        return {}

    day = latest.date()
    week_start = start_of_week(day)
    return {
        "Last 7 Days": DateRangeFilter((day - timedelta(days=7)).isoformat(), latest_date),
        "Last 30 Days": DateRangeFilter((day - timedelta(days=30)).isoformat(), latest_date),
        "Last 90 Days": DateRangeFilter((day - timedelta(days=90)).isoformat(), latest_date),
        "This Week": DateRangeFilter(
            week_start.isoformat(), (week_start + timedelta(days=6)).isoformat()
        ),
    }


def _relative_change(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    return (current - previous) / abs(previous) * 100


def _total_loss(entries: list[WeightEntry]) -> float:
    if not entries:
        return 0.0
    return entries[0].weight - entries[-1].weight


def compare_performance(
    current_period: Iterable[WeightEntry],
    previous_period: Iterable[WeightEntry],
) -> list[ComparisonMetric]:
    """Compare loss rate, total loss and logging frequency of two periods."""
    current = [entry for _, entry in parsed_entries(current_period)]
    previous = [entry for _, entry in parsed_entries(previous_period)]

    current_rate = average_daily_loss(current)
    previous_rate = average_daily_loss(previous)

    current_loss = _total_loss(current)
    previous_loss = _total_loss(previous)

    return [
        ComparisonMetric(
            name="Daily Loss Rate",
            current=abs(current_rate),
            previous=abs(previous_rate),
            change=current_rate - previous_rate,
            change_percent=_relative_change(current_rate, previous_rate),
            unit="kg/day",
        ),
        ComparisonMetric(
            name="Total Weight Lost",
            current=current_loss,
            previous=previous_loss,
            change=current_loss - previous_loss,
            change_percent=_relative_change(current_loss, previous_loss),
            unit="kg",
        ),
        ComparisonMetric(
            name="Tracking Consistency",
            current=float(len(current)),
            previous=float(len(previous)),
            change=float(len(current) - len(previous)),
            change_percent=_relative_change(len(current), len(previous)),
            unit="entries",
        ),
    ]
