"""Tests for goal-date projection."""

from __future__ import annotations

from datetime import date

import pytest

from weightdash.tracking.models import TargetData
from weightdash.tracking.projection import (
    assess_risk,
    change_consistency,
    generate_predictive_analysis,
    weekly_loss_rate,
)


@pytest.fixture
def february_entries(make_series):
    """15 daily entries ending 2025-02-28, losing 0.1 kg per day."""
    return make_series([round(90.0 - 0.1 * i, 2) for i in range(15)], start=date(2025, 2, 14))


@pytest.fixture
def goal() -> TargetData:
    return TargetData("2025-01-01", 95.0, "2025-06-30", 79.95, height=175.0)


class TestHelpers:
    """Tests for projection helpers."""

    def test_weekly_loss_rate(self, february_entries) -> None:
        assert weekly_loss_rate(february_entries) == pytest.approx(0.7)

    def test_weekly_loss_rate_never_negative(self, make_series) -> None:
        assert weekly_loss_rate(make_series([80.0, 81.0, 82.0])) == 0.0

    def test_change_consistency(self, make_series) -> None:
        assert change_consistency(make_series([80.0])) == 0.0
        assert change_consistency(make_series([80.0, 79.0, 78.0])) == 1.0
        assert change_consistency(make_series([80.0, 79.0, 79.0])) == 0.0

    @pytest.mark.parametrize(
        "weekly_loss, risk",
        [(1.3, "aggressive"), (1.2, "moderate"), (0.81, "moderate"), (0.8, "healthy"), (0.0, "healthy")],
    )
    def test_assess_risk(self, weekly_loss: float, risk: str) -> None:
        assert assess_risk(weekly_loss) == risk


class TestGeneratePredictiveAnalysis:
    """Tests for generate_predictive_analysis (clock fixed on 2025-03-01)."""

    def test_trend_projection(self, february_entries, goal, clock) -> None:
        """8.65 kg left at 0.7 kg/week is 86.5 days, truncated to 86."""
        analysis = generate_predictive_analysis(february_entries, goal, clock=clock)

        assert analysis.trend_weekly_loss == pytest.approx(0.7)
        assert analysis.projected_goal_date == "2025-05-26"
        assert analysis.risk_assessment == "healthy"
        assert analysis.recommended_pace == 0.75
        assert analysis.confidence_level == pytest.approx(100.0)

    def test_alternative_scenarios(self, february_entries, goal, clock) -> None:
        scenarios = generate_predictive_analysis(february_entries, goal, clock=clock).alternative_scenarios

        assert scenarios.conservative.date == "2025-06-30"
        assert scenarios.conservative.weekly_loss == 0.5
        assert scenarios.recommended.date == "2025-05-20"
        assert scenarios.aggressive.date == "2025-04-30"

    def test_gaining_uses_recommended_pace(self, make_series, goal, clock) -> None:
        entries = make_series([86.0, 86.5, 87.0], start=date(2025, 2, 20))
        analysis = generate_predictive_analysis(entries, goal, clock=clock)

        assert analysis.trend_weekly_loss == 0.0
        assert analysis.projected_goal_date == analysis.alternative_scenarios.recommended.date
        assert analysis.risk_assessment == "healthy"

    def test_no_entries(self, goal, clock) -> None:
        analysis = generate_predictive_analysis([], goal, clock=clock)

        assert analysis.confidence_level == 0.0
        assert analysis.risk_assessment == "moderate"
        assert analysis.projected_goal_date == "2025-03-01"
        assert analysis.alternative_scenarios.aggressive.date == "2025-03-01"

    def test_confidence_floor(self, make_series, goal, clock) -> None:
        entries = make_series([90.0, 89.0, 89.0, 88.0, 88.0], start=date(2025, 2, 24))
        analysis = generate_predictive_analysis(entries, goal, clock=clock)
        assert analysis.confidence_level == 20.0
