"""Tests for pattern detection, narrative insights and the weekly summary."""

from __future__ import annotations

from datetime import date

from weightdash.tracking.models import TargetData
from weightdash.tracking.patterns import (
    generate_insights,
    generate_weekly_summary,
    identify_patterns,
)
from weightdash.tracking.trend import analyze_trend


class TestIdentifyPatterns:
    """Tests for identify_patterns (series start on Wednesday 2025-01-01)."""

    def test_needs_14_entries(self, make_series) -> None:
        assert identify_patterns(make_series([80.0] * 13)) == []

    def test_plateau(self, make_series) -> None:
        patterns = identify_patterns(make_series([80.0] * 14))

        assert [p.type for p in patterns] == ["plateau"]
        assert patterns[0].severity == "warning"
        assert patterns[0].confidence == 85

    def test_volatility(self, make_series) -> None:
        patterns = identify_patterns(make_series([80.0 if i % 2 == 0 else 81.0 for i in range(14)]))
        assert [p.type for p in patterns] == ["volatility"]

    def test_acceleration(self, make_series) -> None:
        weights = [round(90.0 - 0.05 * i, 2) for i in range(7)]
        weights += [round(89.7 - 0.2 * (i + 1), 2) for i in range(7)]
        patterns = identify_patterns(make_series(weights))

        assert [p.type for p in patterns] == ["acceleration"]
        assert patterns[0].severity == "warning"

    def test_weekday_pattern(self, make_series) -> None:
        """Sundays (2025-01-05 and 2025-01-12) are 2 kg heavier."""
        weights = [82.0 if i in (4, 11) else 80.0 for i in range(14)]
        patterns = identify_patterns(make_series(weights))

        weekday = [p for p in patterns if p.type == "weekday_pattern"]
        assert len(weekday) == 1
        assert weekday[0].description == "Your weight tends to be higher on Sundays"


class TestGenerateInsights:
    """Tests for generate_insights."""

    def test_too_few_entries(self, make_series, sample_goal, clock) -> None:
        insights = generate_insights(make_series([80.0] * 6), sample_goal, clock=clock)
        assert len(insights) == 1
        assert "Keep logging" in insights[0]

    def test_trend_and_consistency(self, sample_entries, sample_goal, clock) -> None:
        insights = generate_insights(sample_entries, sample_goal, clock=clock)

        assert insights[0] == analyze_trend(sample_entries).message
        assert insights[1].startswith("Excellent tracking consistency")

    def test_behind_schedule(self, sample_entries, sample_goal, clock) -> None:
        """97.1 kg at 0.1 kg/day reaches 80 kg in 171 days, the goal ends in 120."""
        insights = generate_insights(sample_entries, sample_goal, clock=clock)
        assert any("increasing your efforts" in insight for insight in insights)


class TestWeeklySummary:
    """Tests for generate_weekly_summary (clock fixed at noon on 2025-03-01)."""

    def test_summary(self, make_series, sample_goal, clock) -> None:
        entries = make_series([round(90.2 - 0.2 * i, 2) for i in range(8)], start=date(2025, 2, 22))
        summary = generate_weekly_summary(entries, sample_goal, clock=clock)

        assert summary is not None
        assert summary.week_start == "2025-02-23"
        assert summary.week_end == "2025-03-01"
        assert summary.days_logged == 7
        assert round(summary.total_change, 2) == 1.2
        assert summary.performance == "excellent"
        assert summary.insights[0] == "You lost 1.20 kg this week!"

    def test_needs_two_recent_entries(self, make_series, sample_goal, clock) -> None:
        entries = make_series([80.0, 79.0], start=date(2025, 2, 1))
        assert generate_weekly_summary(entries, sample_goal, clock=clock) is None

    def test_weight_gain(self, make_series, sample_goal, clock) -> None:
        entries = make_series([80.0, 80.5], start=date(2025, 2, 27))
        summary = generate_weekly_summary(entries, sample_goal, clock=clock)

        assert summary is not None
        assert summary.performance == "needs_improvement"
        assert summary.insights[0] == "Weight increased by 0.50 kg this week."
        assert summary.recommendations[-1].startswith("Try to log your weight more frequently")

    def test_goal_without_duration(self, make_series, clock) -> None:
        goal = TargetData("", 90.0, "", 80.0)
        entries = make_series([80.0, 80.0], start=date(2025, 2, 27))
        summary = generate_weekly_summary(entries, goal, clock=clock)

        assert summary is not None
        assert summary.performance == "excellent"
