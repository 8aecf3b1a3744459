"""Tests for short-term trend classification."""

from __future__ import annotations

import pytest

from weightdash.tracking.trend import analyze_trend, average_daily_loss


class TestAverageDailyLoss:
    """Tests for average_daily_loss."""

    def test_loss_over_window(self, make_series) -> None:
        assert average_daily_loss(make_series([100.0, 99.0, 98.0], step=2)) == pytest.approx(0.5)

    def test_gain_is_negative(self, make_series) -> None:
        assert average_daily_loss(make_series([80.0, 81.0])) == pytest.approx(-1.0)

    def test_degenerate_windows(self, make_series) -> None:
        assert average_daily_loss(make_series([80.0])) == 0.0
        assert average_daily_loss(make_series([80.0, 79.0], step=0)) == 0.0


class TestAnalyzeTrend:
    """Tests for analyze_trend."""

    def test_insufficient_data(self, make_series) -> None:
        """Fewer than 14 entries is a low-confidence steady result, not an error."""
        result = analyze_trend(make_series([80.0] * 13))
        assert result.trend == "steady"
        assert result.confidence == 0.5
        assert "Not enough data" in result.message

    def test_constant_pace_is_steady(self, sample_entries) -> None:
        result = analyze_trend(sample_entries)
        assert result.trend == "steady"
        assert result.confidence == 0.8

    def test_negative_difference_label(self, make_series) -> None:
        """Recent loss rate 0.3 kg/day below the previous window."""
        weights = [round(90.0 - 0.3 * i, 2) for i in range(7)] + [88.2] * 7
        result = analyze_trend(make_series(weights))
        assert result.trend == "accelerating"
        assert result.confidence == 0.85
        assert "0.30kg" in result.message

    def test_positive_difference_label(self, make_series) -> None:
        """Recent loss rate 0.3 kg/day above the previous window."""
        weights = [90.0] * 7 + [round(89.7 - 0.3 * i, 2) for i in range(7)]
        result = analyze_trend(make_series(weights))
        assert result.trend == "slowing"

    def test_plateau(self, make_series) -> None:
        """A small pace change with under 0.5 kg lost over 14 entries."""
        weights = [80.0] * 7 + [round(80.0 - 0.07 * i, 2) for i in range(7)]
        result = analyze_trend(make_series(weights))
        assert result.trend == "plateauing"
        assert result.confidence == 0.9

    def test_unparseable_dates_ignored(self, make_series) -> None:
        entries = make_series([80.0] * 13)
        entries[0].date = "bogus"
        entries.append(entries[0])
        assert analyze_trend(entries).confidence == 0.5
