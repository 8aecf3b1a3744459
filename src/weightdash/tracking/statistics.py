"""Aggregate progress, pace and performance statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from weightdash.tracking.dates import days_between, parse_date_flexible, parsed_entries
from weightdash.tracking.derive import derive_entries, normalize_target_data
from weightdash.tracking.diagnostics import (
    DiagnosticsSink,
    DroppedRecord,
    resolve_diagnostics,
)
from weightdash.tracking.errors import EmptyInputError
from weightdash.tracking.models import BMICategory, TargetData, WeightEntry

BMI_CATEGORIES: tuple[BMICategory, ...] = (
    BMICategory("Underweight", 0.0, 18.5, "#7AA2C7"),
    BMICategory("Normal", 18.5, 24.9, "#7FB38A"),
    BMICategory("Overweight", 25.0, 29.9, "#F2CC8F"),
    BMICategory("Obese", 30.0, 39.9, "#E07A5F"),
    BMICategory("Extremely Obese", 40.0, 100.0, "#B55A4A"),
)

# Floor for the average daily loss when projecting. A flat or gaining user
# would otherwise need infinitely many (or negative) days to reach the goal,
# so the projection saturates instead.
MIN_DAILY_LOSS_FOR_PROJECTION = 0.01


@dataclass
class CurrentStats:
    weight: float
    bmi: float
    bmi_category: str


@dataclass
class ProgressStats:
    total_lost: float
    percentage_complete: float
    days_elapsed: int
    days_remaining: int
    remaining: float


@dataclass
class AverageStats:
    daily: float
    weekly: float
    monthly: float


@dataclass
class TargetStats:
    required_daily_loss: float
    required_weekly_loss: float
    projected_end_date: str  # YYYY-MM-DD
    on_track: bool
    days_ahead_behind: float


@dataclass
class BestDay:
    date: str
    loss: float


@dataclass
class BestWeek:
    week_start: str
    loss: float


@dataclass
class PerformanceStats:
    best_day: BestDay
    best_week: BestWeek
    longest_streak: int  # consecutive entries with a lower weight than the last


@dataclass
class Statistics:
    """Snapshot derived from (entries, goal). Never persisted."""

    current: CurrentStats
    progress: ProgressStats
    averages: AverageStats
    target: TargetStats
    performance: PerformanceStats


@dataclass
class WeekBucket:
    """A run of entries spanning less than seven days from its first entry."""

    start_date: str
    total_loss: float
    entries: list[WeightEntry]


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Return BMI, or 0 when weight or height is not positive."""
    if weight_kg <= 0 or height_cm <= 0:
        return 0.0
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def get_bmi_band(bmi: float) -> Optional[BMICategory]:
    """Return the band containing ``bmi``.

    Bands are half-open on their lower bound and the last band is open
    upward, so a boundary value such as 25.0 belongs to the higher band.
    """
    match = None
    for band in BMI_CATEGORIES:
        if bmi >= band.min:
            match = band
    return match


def get_bmi_category(bmi: float) -> str:
    band = get_bmi_band(bmi)
    return band.category if band is not None else "Unknown"


def get_bmi_color(bmi: float) -> str:
    band = get_bmi_band(bmi)
    return band.color if band is not None else "#9CA3AF"


def group_entries_by_week(entries: list[WeightEntry]) -> list[WeekBucket]:
    """Greedily bucket a chronological series into rolling weeks.

    A new bucket starts at the first entry that is seven or more days after
    the current bucket's first entry. Buckets are not aligned to calendar
    weeks.
    """
    weeks: list[WeekBucket] = []
    current: list[WeightEntry] = []
    bucket_start: Optional[datetime] = None

    def close() -> None:
        if current:
            weeks.append(
                WeekBucket(
                    start_date=current[0].date,
                    total_loss=current[0].weight - current[-1].weight,
                    entries=list(current),
                )
            )

    for entry_dt, entry in parsed_entries(entries):
        if bucket_start is None:
            bucket_start = entry_dt
        if days_between(bucket_start, entry_dt) >= 7:
            close()
            current = [entry]
            bucket_start = entry_dt
        else:
            current.append(entry)

    close()
    return weeks


def longest_loss_streak(entries: list[WeightEntry]) -> int:
    """Longest run of consecutive entries each lighter than the one before."""
    longest = run = 0
    for previous, entry in zip(entries, entries[1:]):
        if entry.weight < previous.weight:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def calculate_statistics(
    entries: Iterable[WeightEntry],
    target: TargetData,
    diagnostics: Optional[DiagnosticsSink] = None,
) -> Statistics:
    """Compute the statistics snapshot for a series and a goal.

    Args:
        entries: Weight entries in any order
        target: The active goal
        diagnostics: Sink for entries dropped because of unparseable dates

    Returns:
        Statistics snapshot

    Raises:
        EmptyInputError: If no entry has a valid date
    """
    sink = resolve_diagnostics(diagnostics)
    entries = list(entries)
    pairs = parsed_entries(entries)

    for entry in entries:
        if parse_date_flexible(entry.date) is None:
            sink.record(
                DroppedRecord("calculate_statistics", f"unparseable date {entry.date!r}", entry)
            )

    if not pairs:
        raise EmptyInputError("No valid weight entries available")

    series = derive_entries(entry for _, entry in pairs)
    goal = normalize_target_data(target)

    first_dt = pairs[0][0]
    current_dt = pairs[-1][0]
    current = series[-1]
    current_weight = current.weight

    bmi = calculate_bmi(current_weight, goal.height)

    total_lost = goal.start_weight - current_weight
    remaining = current_weight - goal.end_weight
    if goal.total_kg > 0:
        percentage_complete = total_lost / goal.total_kg * 100
    else:
        # Goal weight at or above start weight: there is no loss to complete.
        percentage_complete = 0.0
        sink.record(
            DroppedRecord(
                "calculate_statistics",
                f"goal has no weight to lose (total_kg={goal.total_kg}); percentage complete set to 0",
                target,
            )
        )

    start_dt = parse_date_flexible(goal.start_date) or first_dt
    end_dt = parse_date_flexible(goal.end_date) or current_dt

    days_elapsed = days_between(start_dt, current_dt)
    days_remaining = days_between(current_dt, end_dt)

    daily_avg = total_lost / max(days_elapsed, 1)

    required_daily_loss = remaining / max(days_remaining, 1)

    days_needed = remaining / max(daily_avg, MIN_DAILY_LOSS_FOR_PROJECTION)
    projected_end = current_dt + timedelta(days=math.ceil(days_needed))
    days_ahead_behind = goal.total_duration - (days_elapsed + days_needed)

    best_day = BestDay(date=series[0].date, loss=0.0)
    for entry in series:
        if entry.daily_change < best_day.loss:
            best_day = BestDay(date=entry.date, loss=entry.daily_change)

    weeks = group_entries_by_week(series)
    best_week = BestWeek(week_start=weeks[0].start_date if weeks else goal.start_date, loss=0.0)
    for week in weeks:
        if week.total_loss < best_week.loss:
            best_week = BestWeek(week_start=week.start_date, loss=week.total_loss)

    return Statistics(
        current=CurrentStats(
            weight=current_weight,
            bmi=bmi,
            bmi_category=get_bmi_category(bmi),
        ),
        progress=ProgressStats(
            total_lost=total_lost,
            percentage_complete=percentage_complete,
            days_elapsed=days_elapsed,
            days_remaining=days_remaining,
            remaining=remaining,
        ),
        averages=AverageStats(
            daily=daily_avg,
            weekly=daily_avg * 7,
            monthly=daily_avg * 30,
        ),
        target=TargetStats(
            required_daily_loss=required_daily_loss,
            required_weekly_loss=required_daily_loss * 7,
            projected_end_date=projected_end.date().isoformat(),
            on_track=days_ahead_behind >= 0,
            days_ahead_behind=days_ahead_behind,
        ),
        performance=PerformanceStats(
            best_day=best_day,
            best_week=best_week,
            longest_streak=longest_loss_streak(series),
        ),
    )
