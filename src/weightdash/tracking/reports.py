"""Plain-text reports for the terminal."""

from __future__ import annotations

from weightdash.tracking.projection import PredictiveAnalysis
from weightdash.tracking.statistics import Statistics
from weightdash.tracking.trend import TrendAnalysis


def format_statistics_report(stats: Statistics) -> str:
    """Format a statistics snapshot as text."""
    progress = stats.progress
    target = stats.target
    schedule = "ahead of" if target.days_ahead_behind >= 0 else "behind"

    lines = [
        "Weight Progress Report",
        "=" * 45,
        f"Current weight: {stats.current.weight:.1f} kg",
        f"BMI:            {stats.current.bmi:.1f} ({stats.current.bmi_category})",
        f"Total lost:     {progress.total_lost:.1f} kg ({progress.percentage_complete:.1f}% of goal)",
        f"Remaining:      {progress.remaining:.1f} kg",
        f"Days elapsed:   {progress.days_elapsed} ({progress.days_remaining} remaining)",
        "",
        "Averages",
        "-" * 45,
        f"  Daily:   {stats.averages.daily:.3f} kg",
        f"  Weekly:  {stats.averages.weekly:.2f} kg",
        f"  Monthly: {stats.averages.monthly:.2f} kg",
        "",
        "Target",
        "-" * 45,
        f"  Required: {target.required_daily_loss:.3f} kg/day ({target.required_weekly_loss:.2f} kg/week)",
        f"  Projected end date: {target.projected_end_date}",
        f"  {abs(target.days_ahead_behind):.0f} days {schedule} schedule",
    ]

    performance = stats.performance
    lines.extend(
        [
            "",
            "Performance",
            "-" * 45,
            f"  Best day:  {performance.best_day.date} ({performance.best_day.loss:+.2f} kg)",
            f"  Best week: {performance.best_week.week_start} ({performance.best_week.loss:+.2f} kg)",
            f"  Longest losing streak: {performance.longest_streak} entries",
        ]
    )

    return "\n".join(lines)


def format_trend_report(trend: TrendAnalysis) -> str:
    """Format trend analysis as text."""
    return "\n".join(
        [
            f"Trend: {trend.trend} (confidence {trend.confidence:.0%})",
            trend.message,
        ]
    )


def format_projection_report(analysis: PredictiveAnalysis) -> str:
    """Format goal-date projections as text."""
    scenarios = analysis.alternative_scenarios
    lines = [
        "",
        "Goal Projection",
        "=" * 45,
        f"Projected goal date: {analysis.projected_goal_date}",
        f"Current pace:        {analysis.trend_weekly_loss:.2f} kg/week ({analysis.risk_assessment})",
        f"Confidence:          {analysis.confidence_level:.0f}%",
        "",
        "Scenarios",
        "-" * 45,
    ]
    for name in ("conservative", "recommended", "aggressive"):
        scenario = getattr(scenarios, name)
        lines.append(f"  {name.capitalize():<13} {scenario.weekly_loss:.2f} kg/week -> {scenario.date}")

    return "\n".join(lines)
