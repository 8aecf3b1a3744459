"""Derived per-entry fields and ingestion-time normalization."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from weightdash.tracking.dates import (
    days_between,
    entry_datetime,
    normalize_recorded_at,
    parse_date_flexible,
    sort_entries,
    to_iso_date,
)
from weightdash.tracking.diagnostics import (
    DiagnosticsSink,
    DroppedRecord,
    resolve_diagnostics,
)
from weightdash.tracking.models import TargetData, WeightEntry


def _elapsed_days(previous: Optional[datetime], current: Optional[datetime]) -> int:
    """Whole days between two entries, floored and never below 1.

    Same-day re-entries would otherwise divide by zero.
    """
    if previous is None or current is None:
        return 1
    return max(1, math.floor((current - previous) / timedelta(days=1)))


def derive_entries(entries: Iterable[WeightEntry]) -> list[WeightEntry]:
    """Recompute derived fields for a series of entries.

    The series is sorted chronologically and each entry is compared with the
    one before it:

        change_kg      = weight - previous.weight
        change_percent = change_kg / previous.weight * 100
        daily_change   = change_kg / max(1, days since previous)

    The first entry has no baseline, so its derived fields are all zero.
    Only ``date`` and ``weight`` are read, which makes the operation
    idempotent and independent of input order.

    Args:
        entries: Entries in any order

    Returns:
        New entries in chronological order
    """
    derived: list[WeightEntry] = []
    previous: Optional[WeightEntry] = None
    previous_dt: Optional[datetime] = None

    for entry in sort_entries(entries):
        current_dt = entry_datetime(entry)
        week_day = current_dt.strftime("%A") if current_dt is not None else entry.week_day

        if previous is None:
            change_kg = change_percent = daily_change = 0.0
        else:
            change_kg = entry.weight - previous.weight
            change_percent = change_kg / previous.weight * 100 if previous.weight > 0 else 0.0
            daily_change = change_kg / _elapsed_days(previous_dt, current_dt)

        derived.append(
            replace(
                entry,
                week_day=week_day,
                change_kg=change_kg,
                change_percent=change_percent,
                daily_change=daily_change,
            )
        )
        previous, previous_dt = entry, current_dt

    return derived


def normalize_entries(
    records: Iterable[Any],
    diagnostics: Optional[DiagnosticsSink] = None,
) -> list[WeightEntry]:
    """Turn raw stored or imported records into a canonical derived series.

    Records without a parseable date or a positive weight are dropped, not
    raised: one malformed historical row must not block the rest of the
    series. Each drop is reported to ``diagnostics``.

    Args:
        records: ``WeightEntry`` objects or dicts in the storage shape
        diagnostics: Sink for dropped records (default: log a warning)

    Returns:
        Derived entries with canonical dates, in chronological order
    """
    sink = resolve_diagnostics(diagnostics)
    valid: list[WeightEntry] = []

    for record in records:
        try:
            entry = record if isinstance(record, WeightEntry) else WeightEntry.from_dict(record)
        except (TypeError, ValueError) as exc:
            sink.record(DroppedRecord("normalize_entries", str(exc), record))
            continue

        iso_date = to_iso_date(entry.date)
        if iso_date is None:
            sink.record(
                DroppedRecord("normalize_entries", f"unparseable date {entry.date!r}", record)
            )
            continue
        if entry.weight <= 0:
            sink.record(
                DroppedRecord("normalize_entries", f"non-positive weight {entry.weight!r}", record)
            )
            continue

        valid.append(
            replace(
                entry,
                date=iso_date,
                recorded_at=normalize_recorded_at(iso_date, entry.recorded_at),
            )
        )

    return derive_entries(valid)


def normalize_target_data(target: TargetData) -> TargetData:
    """Canonicalize goal dates and recompute the denormalized totals.

    ``total_duration`` is re-derived from the two dates when both parse and
    ``total_kg`` is always ``start_weight - end_weight``. Dates that cannot be
    parsed are kept verbatim.
    """
    start_iso = to_iso_date(target.start_date)
    end_iso = to_iso_date(target.end_date)

    total_duration = target.total_duration
    if start_iso and end_iso:
        total_duration = days_between(
            parse_date_flexible(start_iso), parse_date_flexible(end_iso)
        )

    return replace(
        target,
        start_date=start_iso or target.start_date,
        end_date=end_iso or target.end_date,
        total_duration=total_duration,
        total_kg=target.start_weight - target.end_weight,
    )
