"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from weightdash.app_logging import configure_logging
from weightdash.config import get_settings
from weightdash.tracking import (
    DEFAULT_TARGET,
    CollectingDiagnostics,
    EmptyInputError,
    SyncStatusRegistry,
    TargetData,
    WeightEntry,
    WeightdashError,
    analyze_trend,
    calculate_consistency_stats,
    calculate_entry_streak,
    calculate_moving_averages,
    calculate_statistics,
    calculate_time_of_day_stats,
    calculate_volatility_stats,
    calculate_weekly_deltas,
    detect_anomalies,
    detect_change_point,
    generate_insights,
    generate_predictive_analysis,
    generate_weekly_summary,
    identify_patterns,
    normalize_entries,
    normalize_target_data,
)
from weightdash.tracking.reports import (
    format_projection_report,
    format_statistics_report,
    format_trend_report,
)
from weightdash.tracking.sheets import read_weight_csv

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Weight-tracking analytics: progress, trends and goal projections",
    no_args_is_help=True,
)
console = Console()

ENTRIES_HELP = "Weight entries (JSON list or CSV export)"
TARGET_HELP = "Goal (JSON object)"


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(message: str, json_output: bool) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({"success": False, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def load_entries(path: Optional[Path], json_output: bool) -> list[WeightEntry]:
    """Load and normalize entries from a JSON list or a CSV export."""
    if path is None:
        path = get_settings().data.entries_path
    if path is None:
        fail("No entries file given (use --entries or set data.entries_path)", json_output)
    if not path.exists():
        fail(f"Entries file not found: {path}", json_output)

    try:
        if path.suffix.lower() == ".csv":
            return read_weight_csv(path)
        with open(path) as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON in {path}: {e}", json_output)
    except WeightdashError as e:
        fail(str(e), json_output)

    if isinstance(records, dict):
        records = records.get("entries", [])
    if not isinstance(records, list):
        fail(f"Expected a list of entries in {path}", json_output)
    return normalize_entries(records)


def load_target(path: Optional[Path], json_output: bool) -> TargetData:
    """Load the goal, falling back to the built-in default goal."""
    if path is None:
        path = get_settings().data.target_path
    if path is None:
        logger.debug("No goal file configured, using the default goal")
        return DEFAULT_TARGET
    if not path.exists():
        fail(f"Goal file not found: {path}", json_output)

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON in {path}: {e}", json_output)

    if not isinstance(data, dict):
        fail(f"Expected a goal object in {path}", json_output)
    return normalize_target_data(TargetData.from_dict(data))


def resolve_json(json_output: bool) -> bool:
    return json_output or get_settings().defaults.output_format == "json"


def _fmt(value: Optional[float], fmt: str = ".1f") -> str:
    return "-" if value is None else format(value, fmt)


# ============================================================================
# Callback
# ============================================================================


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(logging.DEBUG if verbose else get_settings().logging.level)


# ============================================================================
# Progress Commands
# ============================================================================


@app.command("stats")
def stats_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    target_path: Optional[Path] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show progress, pace, BMI and best day/week."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    target = load_target(target_path, json_output)

    try:
        stats = calculate_statistics(entries, target)
    except EmptyInputError as e:
        fail(str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "stats",
            "data": asdict(stats),
            "human_summary": (
                f"{stats.current.weight:.1f} kg, {stats.progress.total_lost:.1f} kg lost "
                f"({stats.progress.percentage_complete:.1f}% of goal)"
            ),
        })
    else:
        console.print(format_statistics_report(stats))


@app.command("trend")
def trend_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Classify the recent trend."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    trend = analyze_trend(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "trend",
            "data": asdict(trend),
            "human_summary": f"Trend: {trend.trend}",
        })
    else:
        console.print(format_trend_report(trend))


@app.command("averages")
def averages_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Number of rows to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show 7/14/30-entry moving averages."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    if days is None:
        days = get_settings().defaults.trend_days

    rows = calculate_moving_averages(entries)[-days:] if days > 0 else []

    if json_output:
        output_json({
            "success": True,
            "command": "averages",
            "data": {"averages": [asdict(row) for row in rows]},
            "human_summary": f"{len(rows)} rows",
        })
        return

    table = Table(title=f"Moving Averages (last {len(rows)} entries)")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("MA7", justify="right", style="blue")
    table.add_column("MA14", justify="right", style="blue")
    table.add_column("MA30", justify="right", style="blue")
    for row in rows:
        table.add_row(row.date, f"{row.weight:.1f}", f"{row.ma7:.2f}", f"{row.ma14:.2f}", f"{row.ma30:.2f}")
    console.print(table)


@app.command("consistency")
def consistency_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    target_path: Optional[Path] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show how regularly weight has been logged since the goal started."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    target = load_target(target_path, json_output)
    stats = calculate_consistency_stats(entries, target.start_date)

    summary = (
        f"{stats.tracked_days}/{stats.total_days} days logged "
        f"({stats.consistency_percent:.1f}%), longest gap {stats.longest_gap} days"
    )
    if json_output:
        output_json({
            "success": True,
            "command": "consistency",
            "data": asdict(stats),
            "human_summary": summary,
        })
    else:
        console.print(summary)


@app.command("volatility")
def volatility_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show day-to-day volatility of weight changes."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    stats = calculate_volatility_stats(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "volatility",
            "data": asdict(stats),
            "human_summary": f"Average absolute change {stats.average_absolute_change:.2f} kg/day",
        })
        return

    table = Table(title="Volatility")
    table.add_column("Metric", style="cyan")
    table.add_column("kg/day", justify="right")
    table.add_row("Average change", f"{stats.average_daily_change:+.3f}")
    table.add_row("Standard deviation", f"{stats.std_dev_daily_change:.3f}")
    table.add_row("Average absolute change", f"{stats.average_absolute_change:.3f}")
    console.print(table)


@app.command("weekly")
def weekly_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show weight change per calendar week."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    deltas = calculate_weekly_deltas(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "weekly",
            "data": {"weeks": [asdict(delta) for delta in deltas]},
            "human_summary": f"{len(deltas)} weeks",
        })
        return

    table = Table(title="Weekly Change")
    table.add_column("Week", style="cyan")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Lost (kg)", justify="right")
    for delta in deltas:
        style = "green" if delta.change_kg > 0 else "red" if delta.change_kg < 0 else ""
        table.add_row(
            delta.label,
            delta.week_start,
            delta.week_end,
            f"[{style}]{delta.change_kg:+.2f}[/{style}]" if style else f"{delta.change_kg:+.2f}",
        )
    console.print(table)


@app.command("time-of-day")
def time_of_day_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show average weight by time of day."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    stats = calculate_time_of_day_stats(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "time-of-day",
            "data": asdict(stats),
            "human_summary": f"Usually weighs in: {stats.dominant_period}",
        })
        return

    table = Table(title=f"Time of Day (dominant: {stats.dominant_period})")
    table.add_column("Period", style="cyan")
    table.add_column("Average (kg)", justify="right")
    table.add_row("Morning", _fmt(stats.morning_avg))
    table.add_row("Afternoon", _fmt(stats.afternoon_avg))
    table.add_row("Evening", _fmt(stats.evening_avg))
    table.add_row("Night", _fmt(stats.night_avg))
    console.print(table)


@app.command("anomalies")
def anomalies_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List unusual spikes and drops."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    anomalies = detect_anomalies(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "anomalies",
            "data": {"anomalies": [asdict(anomaly) for anomaly in anomalies]},
            "human_summary": f"{len(anomalies)} anomalies",
        })
        return

    if not anomalies:
        console.print("No anomalies found")
        return

    table = Table(title="Anomalies")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Details")
    for anomaly in anomalies:
        severity_style = "red" if anomaly.severity == "high" else "yellow"
        table.add_row(
            anomaly.date,
            f"{anomaly.weight:.1f}",
            anomaly.type,
            f"[{severity_style}]{anomaly.severity}[/{severity_style}]",
            anomaly.message,
        )
    console.print(table)


@app.command("change-point")
def change_point_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Compare the pace of the last 14 entries with the 14 before."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    insight = detect_change_point(entries)

    if insight is None:
        summary = "No significant change in pace"
    else:
        summary = f"{insight.window}: {insight.direction} ({insight.delta:+.3f} kg/day)"

    if json_output:
        output_json({
            "success": True,
            "command": "change-point",
            "data": asdict(insight) if insight else None,
            "human_summary": summary,
        })
    else:
        console.print(summary)


@app.command("streak")
def streak_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the current logging streak."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    streak = calculate_entry_streak(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "streak",
            "data": {"streak_days": streak},
            "human_summary": f"{streak} day streak",
        })
    else:
        console.print(f"Current streak: [bold]{streak}[/bold] days")


# ============================================================================
# Projection & Insight Commands
# ============================================================================


@app.command("project")
def project_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    target_path: Optional[Path] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Project the goal date at the current and alternative paces."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    target = load_target(target_path, json_output)
    analysis = generate_predictive_analysis(entries, target)

    if json_output:
        output_json({
            "success": True,
            "command": "project",
            "data": asdict(analysis),
            "human_summary": f"Projected goal date: {analysis.projected_goal_date}",
        })
    else:
        console.print(format_projection_report(analysis))


@app.command("patterns")
def patterns_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Detect weekday, plateau, acceleration and volatility patterns."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    patterns = identify_patterns(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "patterns",
            "data": {"patterns": [asdict(pattern) for pattern in patterns]},
            "human_summary": f"{len(patterns)} patterns",
        })
        return

    if not patterns:
        console.print("No patterns found")
        return

    styles = {"warning": "yellow", "success": "green", "info": "blue"}
    for pattern in patterns:
        style = styles.get(pattern.severity or "info", "blue")
        console.print(f"[{style}]{pattern.description}[/{style}] ({pattern.confidence:.0f}% confidence)")
        console.print(f"  {pattern.actionable}")


@app.command("insights")
def insights_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    target_path: Optional[Path] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show short narrative insights."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    target = load_target(target_path, json_output)
    insights = generate_insights(entries, target)

    if json_output:
        output_json({
            "success": True,
            "command": "insights",
            "data": {"insights": insights},
            "human_summary": f"{len(insights)} insights",
        })
    else:
        for insight in insights:
            console.print(f"- {insight}")


@app.command("summary")
def summary_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    target_path: Optional[Path] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Summarize the last seven days."""
    json_output = resolve_json(json_output)
    entries = load_entries(entries_path, json_output)
    target = load_target(target_path, json_output)
    summary = generate_weekly_summary(entries, target)

    if summary is None:
        fail("Not enough entries in the last 7 days for a weekly summary", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "summary",
            "data": asdict(summary),
            "human_summary": f"Week {summary.week_start} to {summary.week_end}: {summary.performance}",
        })
        return

    console.print(f"[bold]Week {summary.week_start} to {summary.week_end}[/bold]")
    console.print(f"Average weight: {summary.average_weight:.1f} kg")
    console.print(f"Change:         {summary.total_change:+.2f} kg lost")
    console.print(f"Performance:    {summary.performance.replace('_', ' ')}")
    for insight in summary.insights:
        console.print(f"  - {insight}")
    console.print("Recommendations:")
    for recommendation in summary.recommendations:
        console.print(f"  - {recommendation}")


@app.command("report")
def report_command(
    entries_path: Optional[Path] = typer.Option(None, "--entries", "-e", help=ENTRIES_HELP),
    target_path: Optional[Path] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
) -> None:
    """Print a full text report: statistics, trend and projection."""
    entries = load_entries(entries_path, False)
    target = load_target(target_path, False)

    try:
        stats = calculate_statistics(entries, target)
    except EmptyInputError as e:
        fail(str(e), False)

    console.print(format_statistics_report(stats))
    console.print("")
    console.print(format_trend_report(analyze_trend(entries)))
    console.print(format_projection_report(generate_predictive_analysis(entries, target)))


# ============================================================================
# Import Commands
# ============================================================================


@app.command("import-csv")
def import_csv_command(
    csv_path: Path = typer.Argument(..., help="CSV export of the weight sheet"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write entries as JSON"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Import a spreadsheet CSV export and optionally save it as JSON."""
    json_output = resolve_json(json_output)
    if not csv_path.exists():
        fail(f"File not found: {csv_path}", json_output)

    dropped = CollectingDiagnostics()
    status = SyncStatusRegistry()
    status.subscribe(lambda s: logger.debug("Import status: %s", s))

    try:
        entries = read_weight_csv(csv_path, diagnostics=dropped, status=status)
    except WeightdashError as e:
        fail(str(e), json_output)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump([entry.to_dict() for entry in entries], f, indent=2)

    summary = f"Imported {len(entries)} entries ({len(dropped.events)} rows skipped)"
    if json_output:
        output_json({
            "success": True,
            "command": "import-csv",
            "data": {
                "imported": len(entries),
                "skipped": dropped.reasons,
                "output": str(output) if output else None,
            },
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")
        if output is not None:
            console.print(f"Saved to [cyan]{output}[/cyan]")


if __name__ == "__main__":
    app()
