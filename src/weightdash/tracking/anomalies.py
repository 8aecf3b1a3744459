"""Outlier and pace change-point detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from weightdash.tracking.dates import parsed_entries
from weightdash.tracking.models import WeightEntry
from weightdash.tracking.trend import average_daily_loss

MIN_ANOMALY_ENTRIES = 5
BASELINE_SIZE = 3
ANOMALY_SIGMA = 2.5
HIGH_SEVERITY_SIGMA = 3.0

MIN_CHANGE_POINT_ENTRIES = 28
CHANGE_POINT_WINDOW = 14
CHANGE_POINT_THRESHOLD = 0.05  # kg/day

LIKELY_REASONS = {
    "spike": "Water retention, high sodium intake, or measurement error",
    "drop": "Dehydration, measurement error, or illness",
}


@dataclass
class AnomalyDetection:
    date: str
    weight: float
    type: str  # 'spike' | 'drop'
    severity: str  # 'medium' | 'high'
    message: str
    likely_reason: Optional[str] = None


@dataclass
class ChangePointInsight:
    window: str
    delta: float
    direction: str  # 'accelerating' | 'slowing' | 'reversing'


def detect_anomalies(entries: Iterable[WeightEntry]) -> list[AnomalyDetection]:
    """Flag entries far outside the spread of the few entries before them.

    Each entry from the third up to the second-to-last is compared with the
    mean and population standard deviation of up to three preceding
    weights. More than 2.5 sigma above is a spike, below is a drop; beyond
    3 sigma the severity is high.
    """
    ordered = [entry for _, entry in parsed_entries(entries)]
    if len(ordered) < MIN_ANOMALY_ENTRIES:
        return []

    anomalies: list[AnomalyDetection] = []
    for i in range(2, len(ordered) - 1):
        current = ordered[i]
        baseline = np.array(
            [entry.weight for entry in ordered[max(0, i - BASELINE_SIZE) : i]], dtype=float
        )
        mean = float(np.mean(baseline))
        sigma = float(np.std(baseline))
        deviation = abs(current.weight - mean)

        if current.weight > mean + ANOMALY_SIGMA * sigma:
            kind, verb = "spike", "increase"
        elif current.weight < mean - ANOMALY_SIGMA * sigma:
            kind, verb = "drop", "decrease"
        else:
            continue

        anomalies.append(
            AnomalyDetection(
                date=current.date,
                weight=current.weight,
                type=kind,
                severity="high" if deviation > HIGH_SEVERITY_SIGMA * sigma else "medium",
                message=f"Unusual weight {verb} of {deviation:.1f} kg",
                likely_reason=LIKELY_REASONS[kind],
            )
        )

    return anomalies


def detect_change_point(entries: Iterable[WeightEntry]) -> Optional[ChangePointInsight]:
    """Compare the average daily loss of the last 14 entries with the 14 before."""
    ordered = [entry for _, entry in parsed_entries(entries)]
    if len(ordered) < MIN_CHANGE_POINT_ENTRIES:
        return None

    recent_loss = average_daily_loss(ordered[-CHANGE_POINT_WINDOW:])
    previous_loss = average_daily_loss(ordered[-2 * CHANGE_POINT_WINDOW : -CHANGE_POINT_WINDOW])

    delta = recent_loss - previous_loss
    if abs(delta) < CHANGE_POINT_THRESHOLD:
        return None

    if delta > 0:
        direction = "accelerating"
    elif recent_loss < 0 and previous_loss > 0:
        direction = "reversing"
    else:
        direction = "slowing"

    return ChangePointInsight(
        window="Last 14 days vs previous 14 days",
        delta=delta,
        direction=direction,
    )
