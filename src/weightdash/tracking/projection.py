"""Goal-date projection under several weekly loss paces.

The projector never projects weight gain: a gaining or flat trend is
clipped to a weekly loss of 0 and the recommended pace is used instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

import numpy as np

from weightdash.tracking.clock import Clock, today
from weightdash.tracking.dates import days_between, parsed_entries
from weightdash.tracking.models import TargetData, WeightEntry

RECENT_WINDOW = 14

CONSERVATIVE_PACE = 0.5  # kg/week, sustainable
RECOMMENDED_PACE = 0.75  # kg/week, balanced
AGGRESSIVE_PACE = 1.0  # kg/week, maximum healthy rate

AGGRESSIVE_RISK_RATE = 1.2
MODERATE_RISK_RATE = 0.8

MIN_CONFIDENCE = 20.0
MAX_CONFIDENCE = 100.0


@dataclass
class Scenario:
    date: str  # YYYY-MM-DD
    weekly_loss: float


@dataclass
class AlternativeScenarios:
    conservative: Scenario
    recommended: Scenario
    aggressive: Scenario


@dataclass
class PredictiveAnalysis:
    projected_goal_date: str  # YYYY-MM-DD
    confidence_level: float  # 0-100
    recommended_pace: float  # kg/week
    risk_assessment: str  # 'healthy' | 'moderate' | 'aggressive'
    alternative_scenarios: AlternativeScenarios
    trend_weekly_loss: float = 0.0  # kg/week over the recent window


def weekly_loss_rate(entries: list[WeightEntry]) -> float:
    """Non-negative weekly loss between the first and last entry."""
    pairs = parsed_entries(entries)
    if len(pairs) < 2:
        return 0.0

    (start_dt, first), (end_dt, last) = pairs[0], pairs[-1]
    days = days_between(start_dt, end_dt)
    if days == 0:
        return 0.0
    return max(0.0, (first.weight - last.weight) / days * 7)


def change_consistency(entries: list[WeightEntry]) -> float:
    """Score 0-1: how evenly sized the entry-to-entry changes are.

    ``1 - std/mean`` of the absolute changes, floored at 0; identical
    changes score 1.
    """
    if len(entries) < 2:
        return 0.0

    weights = np.array([entry.weight for entry in entries], dtype=float)
    changes = np.abs(np.diff(weights))
    std = float(np.std(changes))
    if std == 0:
        return 1.0
    return max(0.0, 1 - std / float(np.mean(changes)))


def _date_after_weeks(start: date, weeks: float) -> str:
    return (start + timedelta(days=int(weeks * 7))).isoformat()


def _scenarios(start: date, remaining: float) -> AlternativeScenarios:
    return AlternativeScenarios(
        conservative=Scenario(_date_after_weeks(start, remaining / CONSERVATIVE_PACE), CONSERVATIVE_PACE),
        recommended=Scenario(_date_after_weeks(start, remaining / RECOMMENDED_PACE), RECOMMENDED_PACE),
        aggressive=Scenario(_date_after_weeks(start, remaining / AGGRESSIVE_PACE), AGGRESSIVE_PACE),
    )


def assess_risk(weekly_loss: float) -> str:
    if weekly_loss > AGGRESSIVE_RISK_RATE:
        return "aggressive"
    if weekly_loss > MODERATE_RISK_RATE:
        return "moderate"
    return "healthy"


def generate_predictive_analysis(
    entries: Iterable[WeightEntry],
    target: TargetData,
    clock: Optional[Clock] = None,
) -> PredictiveAnalysis:
    """
    Project the goal date from the recent trend and from fixed paces.

    Args:
        entries: Weight entries in any order
        target: The active goal (only ``end_weight`` is used)
        clock: Source of "today", the day projections start from

    Returns:
        PredictiveAnalysis; with no valid entries every date is today
    """
    start = today(clock)
    ordered = [entry for _, entry in parsed_entries(entries)]

    if not ordered:
        return PredictiveAnalysis(
            projected_goal_date=start.isoformat(),
            confidence_level=0.0,
            recommended_pace=RECOMMENDED_PACE,
            risk_assessment="moderate",
            alternative_scenarios=_scenarios(start, 0.0),
        )

    recent = ordered[-RECENT_WINDOW:]
    rate = weekly_loss_rate(recent)
    remaining = ordered[-1].weight - target.end_weight

    projected_weeks = remaining / rate if rate > 0 else remaining / RECOMMENDED_PACE
    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, change_consistency(recent) * 100))

    return PredictiveAnalysis(
        projected_goal_date=_date_after_weeks(start, projected_weeks),
        confidence_level=confidence,
        recommended_pace=RECOMMENDED_PACE,
        risk_assessment=assess_risk(rate),
        alternative_scenarios=_scenarios(start, remaining),
        trend_weekly_loss=rate,
    )
