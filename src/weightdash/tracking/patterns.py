"""Pattern insights, narrative insights and the weekly summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Optional

import numpy as np

from weightdash.tracking.clock import Clock, resolve_clock
from weightdash.tracking.dates import days_between, parse_date_flexible, parsed_entries
from weightdash.tracking.derive import normalize_target_data
from weightdash.tracking.models import TargetData, WeightEntry
from weightdash.tracking.projection import weekly_loss_rate
from weightdash.tracking.trend import analyze_trend, average_daily_loss

MIN_PATTERN_ENTRIES = 14
MIN_INSIGHT_ENTRIES = 7

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass
class PatternInsight:
    type: str  # 'weekday_pattern' | 'plateau' | 'acceleration' | 'volatility'
    description: str
    confidence: float
    actionable: str
    severity: Optional[str] = None  # 'info' | 'warning' | 'success'


@dataclass
class WeeklySummary:
    week_start: str
    week_end: str
    average_weight: float
    total_change: float  # loss-positive
    days_logged: int
    performance: str  # 'excellent' | 'good' | 'needs_improvement'
    insights: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def _sunday_index(weekday: int) -> int:
    # datetime.weekday() is Monday=0; DAY_NAMES starts on Sunday
    return (weekday + 1) % 7


def analyze_weekday_pattern(entries: list[WeightEntry]) -> Optional[PatternInsight]:
    """Report the weekday whose average weight is >0.5 kg above the overall mean."""
    by_day: dict[int, list[float]] = {}
    for entry_dt, entry in parsed_entries(entries):
        by_day.setdefault(_sunday_index(entry_dt.weekday()), []).append(entry.weight)
    if not by_day:
        return None

    max_day, max_avg = 0, 0.0
    for day in sorted(by_day):
        average = float(np.mean(by_day[day]))
        if average > max_avg:
            max_day, max_avg = day, average

    overall = float(np.mean([weight for weights in by_day.values() for weight in weights]))
    if max_avg - overall <= 0.5:
        return None

    return PatternInsight(
        type="weekday_pattern",
        description=f"Your weight tends to be higher on {DAY_NAMES[max_day]}s",
        confidence=75,
        actionable="This is normal - weekend weight fluctuations are common due to diet changes.",
        severity="info",
    )


def detect_plateau(entries: list[WeightEntry]) -> Optional[PatternInsight]:
    recent = entries[-14:]
    if len(recent) < 10:
        return None
    if abs(recent[0].weight - recent[-1].weight) >= 0.3:
        return None
    return PatternInsight(
        type="plateau",
        description="Your weight has plateaued over the last 2 weeks",
        confidence=85,
        actionable="Consider adjusting your calorie intake or increasing exercise intensity.",
        severity="warning",
    )


def detect_acceleration(entries: list[WeightEntry]) -> Optional[PatternInsight]:
    recent = entries[-7:]
    previous = entries[-14:-7]
    if len(recent) < 5 or len(previous) < 5:
        return None

    recent_rate = weekly_loss_rate(recent)
    previous_rate = weekly_loss_rate(previous)
    if not (recent_rate > previous_rate * 1.5 and recent_rate > 0.8):
        return None

    return PatternInsight(
        type="acceleration",
        description="Your weight loss has accelerated recently",
        confidence=80,
        actionable=(
            "Great progress! Ensure you're not losing weight too quickly "
            "(>1kg/week can be unhealthy)."
        ),
        severity="warning" if recent_rate > 1.2 else "success",
    )


def detect_volatility(entries: list[WeightEntry]) -> Optional[PatternInsight]:
    recent = entries[-14:]
    if len(recent) < 7:
        return None

    changes = np.abs(np.diff([entry.weight for entry in recent]))
    if float(np.mean(changes)) <= 0.5:
        return None

    return PatternInsight(
        type="volatility",
        description="Your weight fluctuates significantly day-to-day",
        confidence=70,
        actionable=(
            "Consider weighing at the same time each day and tracking weekly "
            "averages instead of daily weights."
        ),
        severity="info",
    )


def identify_patterns(entries: Iterable[WeightEntry]) -> list[PatternInsight]:
    """Run every pattern detector over a series of at least 14 entries."""
    ordered = [entry for _, entry in parsed_entries(entries)]
    if len(ordered) < MIN_PATTERN_ENTRIES:
        return []

    detectors = (analyze_weekday_pattern, detect_plateau, detect_acceleration, detect_volatility)
    return [insight for insight in (detect(ordered) for detect in detectors) if insight]


def generate_insights(
    entries: Iterable[WeightEntry],
    target: TargetData,
    clock: Optional[Clock] = None,
) -> list[str]:
    """Short narrative insights for the dashboard."""
    pairs = parsed_entries(entries)
    if len(pairs) < MIN_INSIGHT_ENTRIES:
        return ["Keep logging your weight daily for more accurate insights!"]

    ordered = [entry for _, entry in pairs]
    insights = [analyze_trend(ordered).message]

    recent_count = len(ordered[-30:])
    if recent_count >= 20:
        insights.append("Excellent tracking consistency! This leads to better results.")
    elif recent_count >= 10:
        insights.append("Good tracking consistency. Try logging more often for better insights.")
    else:
        insights.append("Track more regularly to unlock detailed insights and patterns.")

    weekend = [entry for entry_dt, entry in pairs if entry_dt.weekday() >= 5]
    weekday = [entry for entry_dt, entry in pairs if entry_dt.weekday() < 5]
    if len(weekday) >= 5 and len(weekend) >= 2:
        weekday_loss = abs(average_daily_loss(weekday))
        weekend_loss = abs(average_daily_loss(weekend))
        if weekend_loss < weekday_loss * 0.5:
            insights.append("Weekend progress is slower. Consider planning weekend activities!")
        elif weekend_loss > weekday_loss * 1.5:
            insights.append("Great weekend discipline! Your weekend routine is working well.")

    remaining = ordered[-1].weight - target.end_weight
    avg_loss = average_daily_loss(ordered)
    target_end = parse_date_flexible(target.end_date)
    if avg_loss > 0 and target_end is not None:
        days_to_goal = remaining / avg_loss
        days_left = days_between(resolve_clock(clock).now(), target_end)
        if days_to_goal < days_left:
            insights.append(
                "You're ahead of schedule! At this pace, you'll reach your goal early."
            )
        elif days_to_goal > days_left * 1.2:
            insights.append(
                "Consider increasing your efforts to stay on track with your goal date."
            )

    return insights


def _performance_band(total_change: float, required_weekly_loss: float) -> str:
    if total_change >= required_weekly_loss * 1.2:
        return "excellent"
    if total_change >= required_weekly_loss * 0.8:
        return "good"
    return "needs_improvement"


def generate_weekly_summary(
    entries: Iterable[WeightEntry],
    target: TargetData,
    clock: Optional[Clock] = None,
) -> Optional[WeeklySummary]:
    """Summarize the entries logged during the last seven days.

    Returns None when fewer than two entries fall in that window.
    """
    one_week_ago = resolve_clock(clock).now() - timedelta(days=7)
    week = [entry for entry_dt, entry in parsed_entries(entries) if entry_dt >= one_week_ago]
    if len(week) < 2:
        return None

    goal = normalize_target_data(target)
    required_weekly_loss = (
        goal.total_kg / (goal.total_duration / 7) if goal.total_duration > 0 else 0.0
    )

    total_change = week[0].weight - week[-1].weight
    performance = _performance_band(total_change, required_weekly_loss)

    insights: list[str] = []
    if total_change > 0:
        insights.append(f"You lost {total_change:.2f} kg this week!")
    elif total_change < 0:
        insights.append(f"Weight increased by {abs(total_change):.2f} kg this week.")
    else:
        insights.append("Your weight remained stable this week.")
    insights.append(f"You logged weight {len(week)} times this week.")

    if performance == "excellent":
        recommendations = [
            "Outstanding progress! Keep up the great work.",
            "Make sure you're not losing weight too quickly.",
        ]
    elif performance == "good":
        recommendations = [
            "Solid progress towards your goal!",
            "You're on track - stay consistent.",
        ]
    else:
        recommendations = [
            "Consider reviewing your nutrition and exercise habits.",
            "Track your calories to ensure you're in a deficit.",
            "Consistency is key - try logging daily.",
        ]
    if len(week) < 5:
        recommendations.append("Try to log your weight more frequently for better tracking.")

    return WeeklySummary(
        week_start=week[0].date,
        week_end=week[-1].date,
        average_weight=float(np.mean([entry.weight for entry in week])),
        total_change=total_change,
        days_logged=len(week),
        performance=performance,
        insights=insights,
        recommendations=recommendations,
    )
