"""Short-term trend classification.

The most recent seven entries are compared with the seven before them.
Windows count entries, not calendar days, so irregular logging stretches or
shrinks the period a window covers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from weightdash.tracking.dates import days_between, parsed_entries
from weightdash.tracking.models import WeightEntry

MIN_TREND_ENTRIES = 14
TREND_WINDOW = 7

STEADY_THRESHOLD = 0.05  # kg/day
CHANGE_THRESHOLD = 0.1  # kg/day
PLATEAU_LOSS_KG = 0.5  # over the last 14 entries


@dataclass
class TrendAnalysis:
    trend: str  # 'accelerating' | 'steady' | 'slowing' | 'plateauing'
    confidence: float
    message: str


def average_daily_loss(entries: Sequence[WeightEntry]) -> float:
    """Average loss per day between the first and last entry of a window.

    Returns 0 for fewer than two entries or a window spanning zero days.
    """
    pairs = parsed_entries(entries)
    if len(pairs) < 2:
        return 0.0

    (start_dt, first), (end_dt, last) = pairs[0], pairs[-1]
    days = days_between(start_dt, end_dt)
    if days <= 0:
        return 0.0
    return (first.weight - last.weight) / days


def analyze_trend(entries: Iterable[WeightEntry]) -> TrendAnalysis:
    """Classify the recent trajectory as accelerating, steady, slowing or plateauing."""
    ordered = [entry for _, entry in parsed_entries(entries)]
    if len(ordered) < MIN_TREND_ENTRIES:
        return TrendAnalysis(
            trend="steady",
            confidence=0.5,
            message="Not enough data to analyze trend. Keep tracking!",
        )

    recent = ordered[-TREND_WINDOW:]
    previous = ordered[-2 * TREND_WINDOW : -TREND_WINDOW]

    difference = average_daily_loss(recent) - average_daily_loss(previous)

    if abs(difference) < STEADY_THRESHOLD:
        return TrendAnalysis(
            trend="steady",
            confidence=0.8,
            message="Your weight loss is steady and consistent. Great job maintaining your pace!",
        )
    if difference < -CHANGE_THRESHOLD:
        return TrendAnalysis(
            trend="accelerating",
            confidence=0.85,
            message=(
                f"Your weight loss is accelerating! You're losing {abs(difference):.2f}kg "
                "more per day than last week."
            ),
        )
    if difference > CHANGE_THRESHOLD:
        return TrendAnalysis(
            trend="slowing",
            confidence=0.85,
            message="Your weight loss is slowing down. Consider reviewing your diet and exercise routine.",
        )

    two_week_loss = ordered[-2 * TREND_WINDOW].weight - ordered[-1].weight
    if two_week_loss < PLATEAU_LOSS_KG:
        return TrendAnalysis(
            trend="plateauing",
            confidence=0.9,
            message="You may be hitting a plateau. Try mixing up your routine to break through!",
        )

    return TrendAnalysis(
        trend="steady",
        confidence=0.75,
        message="Your progress is stable. Keep up the good work!",
    )
