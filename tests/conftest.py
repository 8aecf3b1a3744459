"""Pytest fixtures for weightdash tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Sequence

import pytest

from weightdash.tracking.clock import FixedClock
from weightdash.tracking.models import TargetData, WeightEntry

TODAY = date(2025, 3, 1)

SeriesFactory = Callable[..., list[WeightEntry]]


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at noon on 2025-03-01."""
    return FixedClock.on(TODAY)


@pytest.fixture
def make_series() -> SeriesFactory:
    """Build a series of entries from a list of weights.

    Entries start on ``start`` and are ``step`` days apart.
    """

    def factory(
        weights: Sequence[float],
        start: date = date(2025, 1, 1),
        step: int = 1,
    ) -> list[WeightEntry]:
        return [
            WeightEntry(date=(start + timedelta(days=i * step)).isoformat(), weight=weight)
            for i, weight in enumerate(weights)
        ]

    return factory


@pytest.fixture
def sample_goal() -> TargetData:
    """100 kg to 80 kg over the first half of 2025."""
    return TargetData(
        start_date="2025-01-01",
        start_weight=100.0,
        end_date="2025-06-30",
        end_weight=80.0,
        total_duration=180,
        total_kg=20.0,
        height=180.0,
    )


@pytest.fixture
def sample_entries(make_series: SeriesFactory) -> list[WeightEntry]:
    """30 daily entries in January 2025, losing 0.1 kg per day."""
    return make_series([round(100.0 - 0.1 * i, 2) for i in range(30)])
