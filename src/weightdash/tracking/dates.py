"""Flexible date parsing and canonicalization.

Observations come from manual entry, voice transcription and imported
spreadsheet cells with inconsistent locale formatting. Every component
compares dates through this module, which reduces all of those encodings to
naive local datetimes and to the canonical ``YYYY-MM-DD`` string.

Parsing never raises: unrecognized input yields ``None`` and the caller
decides what to do with the record.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from numbers import Real
from typing import Any, Iterable, Optional, TypeVar

from dateutil import parser as dateparser

from weightdash.tracking.clock import Clock, resolve_clock

# Spreadsheet serial dates count days from 1899-12-30, so serial 25569 is
# 1970-01-01 and serial 1 is 1899-12-31. Sheets imports only line up with
# this exact offset.
SERIAL_EPOCH = datetime(1899, 12, 30)
UNIX_EPOCH_SERIAL = 25569

MS_PER_DAY = 86400 * 1000

# Tried in order against the date portion of a string. strptime accepts
# single-digit day and month, so "%d/%m/%Y" also covers d/M/yyyy.
DATE_FORMATS = ("%d.%m.%Y", "%d-%m-%Y", "%d/%m/%Y", "%Y-%m-%d")

TIME_ONLY_RE = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")

# Two unrelated defaults for the last-resort parse. A field missing from the
# input is filled from the default, so the two results differ.
FALLBACK_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

T = TypeVar("T")


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _to_local_naive(value)
    return datetime(value.year, value.month, value.day)


def from_serial(value: float) -> Optional[datetime]:
    """Convert a spreadsheet serial day number to a datetime.

    Fractional serials carry the time of day, rounded to the millisecond.

    Example:
        >>> from_serial(45000)
        datetime.datetime(2023, 3, 15, 0, 0)
    """
    try:
        return SERIAL_EPOCH + timedelta(milliseconds=round(value * MS_PER_DAY))
    except (OverflowError, ValueError):
        return None


def _from_timestamp_ms(value: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(value / 1000)
    except (OverflowError, OSError, ValueError):
        return None


def _combine_time(text: str, reference: datetime) -> Optional[datetime]:
    parts = [int(part) for part in text.split(":")]
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) > 2 else 0
    try:
        return reference.replace(hour=hours, minute=minutes, second=seconds, microsecond=0)
    except ValueError:
        return None


def _parse_iso(text: str) -> Optional[datetime]:
    try:
        return _to_local_naive(dateparser.isoparse(text))
    except (ValueError, OverflowError):
        return None


def parse_date_flexible(
    value: Any,
    reference: Optional[date | datetime] = None,
    clock: Optional[Clock] = None,
) -> Optional[datetime]:
    """Parse a heterogeneous date/time value into a naive local datetime.

    Accepted inputs, in the order they are tried:

    - ``datetime``/``date`` objects (aware datetimes are converted to local time)
    - numbers, read as spreadsheet serial dates (then as epoch milliseconds)
    - time-only strings ``H:mm[:ss]``, placed on ``reference`` (default: now)
    - ISO-8601 strings with a time component
    - the date portion of any other string (text after the first space is
      discarded) as ISO-8601, then as ``dd.MM.yyyy``, ``dd-MM-yyyy``,
      ``dd/MM/yyyy``, ``d/M/yyyy`` and ``yyyy-MM-dd``
    - finally a lenient free-form parse

    Args:
        value: Raw value from storage, an import or user input
        reference: Day used for time-only strings
        clock: Source of "now" when no reference is given

    Returns:
        Parsed datetime, or None if nothing matched
    """
    if value is None or value is False or value == "":
        return None

    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, Real) and not isinstance(value, bool):
        number = float(value)
        if not math.isfinite(number) or number == 0:
            return None
        return from_serial(number) or _from_timestamp_ms(number)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if TIME_ONLY_RE.match(text):
        base = reference if reference is not None else resolve_clock(clock).now()
        return _combine_time(text, _as_datetime(base))

    if "T" in text:
        parsed = _parse_iso(text)
        if parsed is not None:
            return parsed

    base_text = text.split(" ")[0]
    parsed = _parse_iso(base_text)
    if parsed is not None:
        return parsed

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(base_text, fmt)
        except ValueError:
            continue

    return _parse_complete_date(base_text)


def _parse_complete_date(text: str) -> Optional[datetime]:
    """Lenient parse that only accepts text naming a full year, month and day."""
    try:
        first, second = (dateparser.parse(text, default=default) for default in FALLBACK_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return _to_local_naive(first)


def to_iso_date(value: Any) -> Optional[str]:
    """Return the canonical ``YYYY-MM-DD`` form of ``value`` or None."""
    parsed = parse_date_flexible(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def _serialize_instant(value: datetime) -> str:
    return value.astimezone().isoformat(timespec="seconds")


def normalize_recorded_at(date_iso: str, value: Any) -> Optional[str]:
    """Reconcile a recorded-at value with the date of its entry.

    A value holding both a date and a time is re-parsed and serialized as an
    absolute instant; a bare time is spliced onto ``date_iso``. Returns None
    when the value is absent or cannot be parsed.

    Example:
        >>> normalize_recorded_at("2025-01-15", "07:30")
        '2025-01-15T07:30'
    """
    if not value:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if "T" in text:
            parsed = parse_date_flexible(text)
            return _serialize_instant(parsed) if parsed is not None else text
        if TIME_ONLY_RE.match(text):
            return f"{date_iso}T{text}"
        if " " in text:
            day_part, _, time_part = text.partition(" ")
            time_part = time_part.strip()
            day_iso = to_iso_date(day_part)
            if day_iso and TIME_ONLY_RE.match(time_part):
                parsed = parse_date_flexible(f"{day_iso}T{time_part}")
                if parsed is not None:
                    return _serialize_instant(parsed)

    parsed = parse_date_flexible(value)
    return _serialize_instant(parsed) if parsed is not None else None


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Return whole days from ``start`` to ``end``, truncated toward zero."""
    delta = _as_datetime(end) - _as_datetime(start)
    return int(delta / timedelta(days=1))


def start_of_week(day: date) -> date:
    """Return the Sunday starting the calendar week that contains ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def entry_datetime(entry: Any) -> Optional[datetime]:
    """Parse the ``date`` attribute of an entry."""
    return parse_date_flexible(getattr(entry, "date", None))


def _sort_key(entry: Any) -> datetime:
    parsed = entry_datetime(entry)
    return parsed if parsed is not None else datetime.min


def sort_entries(entries: Iterable[T]) -> list[T]:
    """Sort entries chronologically.

    Entries whose date cannot be parsed sort first, in input order.
    """
    return sorted(entries, key=_sort_key)


def parsed_entries(entries: Iterable[T]) -> list[tuple[datetime, T]]:
    """Return ``(datetime, entry)`` pairs sorted by date, skipping bad dates."""
    pairs = []
    for entry in entries:
        parsed = entry_datetime(entry)
        if parsed is not None:
            pairs.append((parsed, entry))
    pairs.sort(key=lambda pair: pair[0])
    return pairs
