"""Import weight history and goals from spreadsheet exports.

A weight sheet is a header row plus data rows. Column positions are
resolved from the header through a set of aliases, so exports with
reordered or renamed columns still import. The goal sheet is a single
value column read top to bottom.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional, Sequence

import pandas as pd

from weightdash.tracking.dates import TIME_ONLY_RE, to_iso_date
from weightdash.tracking.derive import normalize_entries
from weightdash.tracking.diagnostics import (
    DiagnosticsSink,
    DroppedRecord,
    resolve_diagnostics,
)
from weightdash.tracking.errors import ImportSchemaError, WeightdashError
from weightdash.tracking.models import TargetData, WeightEntry, to_float
from weightdash.tracking.status import SyncStatusRegistry

DEFAULT_COLUMN_MAP: dict[str, int] = {
    "date": 0,
    "week_day": 1,
    "weight": 2,
    "change_percent": 3,
    "change_kg": 4,
    "daily_change": 5,
    "recorded_at": 6,
}

COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date",),
    "week_day": ("weekday", "week day", "day"),
    "weight": ("weight",),
    "change_percent": ("change%", "change percent", "changepercent"),
    "change_kg": ("change kg", "changekg"),
    "daily_change": ("daily change", "dailychange"),
    "recorded_at": ("recorded at", "recordedat", "recorded time", "time", "timestamp"),
}

REQUIRED_COLUMNS = ("Date", "Weight")

NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")


def normalize_header(value: Any) -> str:
    """Lowercase, drop spaces and underscores, spell out ``%``."""
    return re.sub(r"[\s_]", "", str(value).lower()).replace("%", "percent")


def resolve_weight_column_map(header: Sequence[Any]) -> dict[str, int]:
    """Map each entry field to its column index.

    An empty header row yields the default positional layout. Fields whose
    header is not found keep their default position.

    Raises:
        ImportSchemaError: If the header has no Date or no Weight column
    """
    column_map = dict(DEFAULT_COLUMN_MAP)
    if not header:
        return column_map

    normalized = [normalize_header(cell) for cell in header]
    missing = [name for name in REQUIRED_COLUMNS if normalize_header(name) not in normalized]
    if missing:
        raise ImportSchemaError(missing)

    for index, cell in enumerate(normalized):
        for field_name, aliases in COLUMN_ALIASES.items():
            if any(normalize_header(alias) == cell for alias in aliases):
                column_map[field_name] = index

    return column_map


def _cell(row: Sequence[Any], index: int) -> Any:
    if index < len(row):
        return row[index]
    return None


def _date_cell(value: Any) -> Any:
    # Purely numeric text from a CSV export is a serial date
    if isinstance(value, str) and NUMERIC_RE.match(value.strip()):
        return float(value)
    return value


def _recorded_at_cell(raw: Any, date_iso: str) -> Optional[str]:
    if raw in (None, ""):
        return None
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if not text or "T" in text:
        return text or None
    if " " in text:
        raw_date, _, raw_time = text.partition(" ")
        day_iso = to_iso_date(raw_date)
        if day_iso and raw_time.strip():
            return f"{day_iso}T{raw_time.strip()}"
        return text
    return f"{date_iso}T{text}"


def map_weight_row(row: Sequence[Any], column_map: dict[str, int]) -> Optional[WeightEntry]:
    """Convert one sheet row to an entry, or None if it has no usable date or weight."""
    date_iso = to_iso_date(_date_cell(_cell(row, column_map["date"])))
    weight = to_float(_cell(row, column_map["weight"]))
    if not date_iso or weight is None:
        return None

    week_day = _cell(row, column_map["week_day"])
    return WeightEntry(
        date=date_iso,
        weight=weight,
        week_day=str(week_day) if week_day else "",
        change_percent=to_float(_cell(row, column_map["change_percent"])) or 0.0,
        change_kg=to_float(_cell(row, column_map["change_kg"])) or 0.0,
        daily_change=to_float(_cell(row, column_map["daily_change"])) or 0.0,
        recorded_at=_recorded_at_cell(_cell(row, column_map["recorded_at"]), date_iso),
    )


def import_weight_rows(
    header: Sequence[Any],
    rows: Sequence[Sequence[Any]],
    diagnostics: Optional[DiagnosticsSink] = None,
    status: Optional[SyncStatusRegistry] = None,
) -> list[WeightEntry]:
    """
    Import a weight sheet into a derived, chronologically sorted series.

    Args:
        header: Header row (may be empty for the default layout)
        rows: Data rows below the header
        diagnostics: Sink for rows dropped during import
        status: Registry notified of syncing/success/error

    Returns:
        Normalized entries

    Raises:
        ImportSchemaError: If the header lacks Date or Weight
    """
    sink = resolve_diagnostics(diagnostics)
    if status is not None:
        status.notify("syncing")

    try:
        column_map = resolve_weight_column_map(header)
        entries = []
        for line, row in enumerate(rows, start=2):
            entry = map_weight_row(row, column_map)
            if entry is None:
                sink.record(
                    DroppedRecord("import_weight_rows", f"row {line} has no usable date or weight", list(row))
                )
                continue
            entries.append(entry)
        result = normalize_entries(entries, diagnostics=sink)
    except WeightdashError as exc:
        if status is not None:
            status.notify("error", str(exc))
        raise

    if status is not None:
        status.notify("success")
    return result


def _value(values: Sequence[Any], index: int) -> Any:
    if index >= len(values):
        return None
    cell = values[index]
    if isinstance(cell, (list, tuple)):
        return cell[0] if cell else None
    return cell


def parse_target_values(values: Sequence[Any]) -> TargetData:
    """Read a goal from the value column of the target sheet.

    Rows, top to bottom: start date, start weight, end date, end weight,
    duration in days, total kg (sign ignored), height in cm. Each row may be
    a bare value or a one-cell list as returned by spreadsheet APIs.
    """
    duration = to_float(_value(values, 4))
    return TargetData(
        start_date=to_iso_date(_date_cell(_value(values, 0))) or "",
        start_weight=to_float(_value(values, 1)) or 0.0,
        end_date=to_iso_date(_date_cell(_value(values, 2))) or "",
        end_weight=to_float(_value(values, 3)) or 0.0,
        total_duration=int(duration) if duration is not None else 0,
        total_kg=abs(to_float(_value(values, 5)) or 0.0),
        height=to_float(_value(values, 6)) or 0.0,
    )


def read_weight_csv(
    path: str | Path,
    diagnostics: Optional[DiagnosticsSink] = None,
    status: Optional[SyncStatusRegistry] = None,
) -> list[WeightEntry]:
    """Load a weight sheet exported as CSV.

    Every cell is read as text so dates keep their original formatting.

    Raises:
        ImportSchemaError: If the file has no header row at all
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        error = ImportSchemaError(list(REQUIRED_COLUMNS))
        if status is not None:
            status.notify("error", str(error))
        raise error from exc
    header = [str(column) for column in df.columns]
    rows = df.values.tolist()
    return import_weight_rows(header, rows, diagnostics=diagnostics, status=status)
