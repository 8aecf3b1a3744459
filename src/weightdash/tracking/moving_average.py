"""Trailing moving averages over the entry series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from weightdash.tracking.dates import sort_entries
from weightdash.tracking.models import WeightEntry

MA_WINDOWS = (7, 14, 30)


@dataclass
class MovingAverageData:
    date: str
    weight: float
    ma7: float
    ma14: float
    ma30: float


def trailing_mean(weights: np.ndarray, window: int) -> np.ndarray:
    """
    Mean of the ``window`` samples ending at each index.

    Indexes with fewer than ``window`` samples available keep their own raw
    value, so a chart never shows a gap at the start of the series.

    Example:
        >>> trailing_mean(np.array([1.0, 2.0, 3.0]), 2)
        array([1. , 1.5, 2.5])
    """
    means = weights.astype(float).copy()
    if window > 0 and len(weights) >= window:
        cumulative = np.cumsum(np.insert(weights.astype(float), 0, 0.0))
        means[window - 1 :] = (cumulative[window:] - cumulative[:-window]) / window
    return means


def calculate_moving_averages(entries: Iterable[WeightEntry]) -> list[MovingAverageData]:
    """Compute 7/14/30-entry trailing averages, one row per entry."""
    ordered = sort_entries(entries)
    weights = np.array([entry.weight for entry in ordered], dtype=float)
    ma7, ma14, ma30 = (trailing_mean(weights, window) for window in MA_WINDOWS)

    return [
        MovingAverageData(
            date=entry.date,
            weight=entry.weight,
            ma7=float(ma7[i]),
            ma14=float(ma14[i]),
            ma30=float(ma30[i]),
        )
        for i, entry in enumerate(ordered)
    ]
