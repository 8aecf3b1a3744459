"""Tests for the statistics snapshot and BMI banding."""

from __future__ import annotations

import pytest

from weightdash.tracking.diagnostics import CollectingDiagnostics
from weightdash.tracking.errors import EmptyInputError
from weightdash.tracking.models import TargetData, WeightEntry
from weightdash.tracking.statistics import (
    calculate_bmi,
    calculate_statistics,
    get_bmi_category,
    get_bmi_color,
    group_entries_by_week,
    longest_loss_streak,
)


@pytest.fixture
def weekly_entries() -> list[WeightEntry]:
    return [
        WeightEntry("2025-01-01", 100.0),
        WeightEntry("2025-01-08", 99.0),
        WeightEntry("2025-01-15", 98.0),
    ]


class TestBMI:
    """Tests for BMI calculation and banding."""

    def test_calculate_bmi(self) -> None:
        assert calculate_bmi(81.0, 180.0) == pytest.approx(25.0)

    def test_non_positive_inputs(self) -> None:
        assert calculate_bmi(80.0, 0.0) == 0.0
        assert calculate_bmi(0.0, 180.0) == 0.0

    @pytest.mark.parametrize(
        "bmi, category",
        [
            (18.49, "Underweight"),
            (18.5, "Normal"),
            (24.95, "Normal"),
            (25.0, "Overweight"),
            (29.95, "Overweight"),
            (30.0, "Obese"),
            (39.95, "Obese"),
            (40.0, "Extremely Obese"),
            (150.0, "Extremely Obese"),
        ],
    )
    def test_boundaries(self, bmi: float, category: str) -> None:
        """Every non-negative BMI lands in exactly one band."""
        assert get_bmi_category(bmi) == category

    @pytest.mark.parametrize("weight", [40.0, 57.5, 81.0, 97.2, 129.6, 250.0])
    @pytest.mark.parametrize("height", [150.0, 180.0, 210.0])
    def test_every_positive_input_has_a_band(self, weight: float, height: float) -> None:
        labels = {"Underweight", "Normal", "Overweight", "Obese", "Extremely Obese"}
        assert get_bmi_category(calculate_bmi(weight, height)) in labels

    def test_negative_bmi_unknown(self) -> None:
        assert get_bmi_category(-1.0) == "Unknown"
        assert get_bmi_color(-1.0) == "#9CA3AF"

    def test_color(self) -> None:
        assert get_bmi_color(22.0) == "#7FB38A"


class TestCalculateStatistics:
    """Tests for calculate_statistics."""

    def test_progress_scenario(self, weekly_entries, sample_goal) -> None:
        """Lost 2 of 20 kg in 14 days."""
        stats = calculate_statistics(weekly_entries, sample_goal)

        assert stats.current.weight == 98.0
        assert stats.progress.total_lost == pytest.approx(2.0)
        assert stats.progress.percentage_complete == pytest.approx(10.0)
        assert stats.progress.days_elapsed == 14
        assert stats.progress.days_remaining == 166
        assert stats.progress.remaining == pytest.approx(18.0)
        assert stats.averages.daily == pytest.approx(0.142857, abs=1e-5)
        assert stats.averages.weekly == pytest.approx(1.0)
        assert stats.averages.monthly == pytest.approx(30 / 7)

    def test_two_entry_scenario(self) -> None:
        entries = [WeightEntry("2025-01-01", 100.0), WeightEntry("2025-01-15", 98.0)]
        goal = TargetData.from_dict(
            {"startDate": "2025-01-01", "startWeight": 100, "endDate": "2025-07-01", "endWeight": 80, "totalKg": 20}
        )
        stats = calculate_statistics(entries, goal)

        assert stats.progress.total_lost == pytest.approx(2.0)
        assert stats.progress.percentage_complete == pytest.approx(10.0)
        assert stats.progress.days_elapsed == 14
        assert stats.averages.daily == pytest.approx(0.143, abs=1e-3)

    def test_target_pace(self, weekly_entries, sample_goal) -> None:
        stats = calculate_statistics(weekly_entries, sample_goal)

        assert stats.target.required_daily_loss == pytest.approx(18 / 166)
        assert stats.target.required_weekly_loss == pytest.approx(18 / 166 * 7)
        assert stats.target.days_ahead_behind == pytest.approx(40.0)
        assert stats.target.on_track is True

    def test_bmi_from_goal_height(self, weekly_entries, sample_goal) -> None:
        stats = calculate_statistics(weekly_entries, sample_goal)
        assert stats.current.bmi == pytest.approx(98.0 / 3.24)
        assert stats.current.bmi_category == "Obese"

    def test_performance(self, weekly_entries, sample_goal) -> None:
        stats = calculate_statistics(weekly_entries, sample_goal)

        assert stats.performance.best_day.date == "2025-01-08"
        assert stats.performance.best_day.loss == pytest.approx(-1 / 7)
        assert stats.performance.best_week.week_start == "2025-01-01"
        assert stats.performance.longest_streak == 2

    def test_input_order_irrelevant(self, weekly_entries, sample_goal) -> None:
        forward = calculate_statistics(weekly_entries, sample_goal)
        backward = calculate_statistics(list(reversed(weekly_entries)), sample_goal)
        assert forward == backward

    def test_empty_series_raises(self, sample_goal) -> None:
        with pytest.raises(EmptyInputError):
            calculate_statistics([], sample_goal)

    def test_bad_dates_reported_then_raise(self, sample_goal) -> None:
        sink = CollectingDiagnostics()
        with pytest.raises(EmptyInputError):
            calculate_statistics([WeightEntry("bogus", 90.0)], sample_goal, diagnostics=sink)
        assert sink.events[0].source == "calculate_statistics"

    def test_goal_without_loss(self, weekly_entries) -> None:
        """A goal weight above the start weight gives 0% complete."""
        goal = TargetData("2025-01-01", 100.0, "2025-06-30", 110.0, height=180.0)
        sink = CollectingDiagnostics()
        stats = calculate_statistics(weekly_entries, goal, diagnostics=sink)
        assert stats.progress.percentage_complete == 0.0
        assert [event.source for event in sink.events] == ["calculate_statistics"]
        assert "no weight to lose" in sink.events[0].reason
        assert sink.events[0].record is goal

    def test_flat_series_projection_saturates(self, sample_goal) -> None:
        entries = [WeightEntry("2025-01-01", 100.0), WeightEntry("2025-01-11", 100.0)]
        stats = calculate_statistics(entries, sample_goal)
        assert stats.averages.daily == 0.0
        assert stats.target.on_track is False
        assert stats.target.projected_end_date > "2030-01-01"


class TestHelpers:
    """Tests for week grouping and the loss streak."""

    def test_group_entries_by_week(self, make_series) -> None:
        weeks = group_entries_by_week(make_series([100.0, 99.8, 99.5, 99.0], step=3))
        assert [w.start_date for w in weeks] == ["2025-01-01", "2025-01-10"]
        assert weeks[0].total_loss == pytest.approx(0.5)
        assert weeks[1].total_loss == 0.0

    def test_longest_loss_streak(self, make_series) -> None:
        entries = make_series([100.0, 99.0, 98.0, 98.5, 98.0, 97.0, 96.0, 95.0])
        assert longest_loss_streak(entries) == 4
