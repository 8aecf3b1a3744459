"""Data models for weight entries and the weight goal."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def to_float(value: Any) -> Optional[float]:
    """Leniently convert a stored or imported cell to a finite float."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class WeightEntry:
    """A single dated weight observation.

    ``change_percent``, ``change_kg`` and ``daily_change`` are derived from the
    chronologically sorted series and are recomputed on every derivation;
    values read from storage are never trusted.
    """

    date: str  # canonical YYYY-MM-DD
    weight: float  # kg
    week_day: str = ""  # advisory, recomputed from date
    change_percent: float = 0.0
    change_kg: float = 0.0
    daily_change: float = 0.0
    recorded_at: Optional[str] = None  # local YYYY-MM-DDTHH:mm[:ss]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WeightEntry":
        """Build an entry from the stored (camelCase) or snake_case shape.

        Raises:
            ValueError: If the record has no date or no numeric weight
        """
        raw_date = _pick(data, "date")
        if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
            raise ValueError(f"entry has no date: {dict(data)!r}")
        weight = to_float(_pick(data, "weight"))
        if weight is None:
            raise ValueError(f"entry has no numeric weight: {dict(data)!r}")

        recorded_at = _pick(data, "recordedAt", "recorded_at")
        return cls(
            date=raw_date.strip() if isinstance(raw_date, str) else raw_date,
            weight=weight,
            week_day=str(_pick(data, "weekDay", "week_day") or ""),
            change_percent=to_float(_pick(data, "changePercent", "change_percent")) or 0.0,
            change_kg=to_float(_pick(data, "changeKg", "change_kg")) or 0.0,
            daily_change=to_float(_pick(data, "dailyChange", "daily_change")) or 0.0,
            recorded_at=recorded_at if recorded_at not in ("", None) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the storage shape."""
        data: dict[str, Any] = {
            "date": self.date,
            "weekDay": self.week_day,
            "weight": self.weight,
            "changePercent": self.change_percent,
            "changeKg": self.change_kg,
            "dailyChange": self.daily_change,
        }
        if self.recorded_at:
            data["recordedAt"] = self.recorded_at
        return data


@dataclass
class TargetData:
    """The single active weight goal.

    ``start_date``/``start_weight`` anchor pace calculations and are
    independent of the first logged entry. ``total_duration`` and
    ``total_kg`` are denormalized; see ``derive.normalize_target_data``.
    """

    start_date: str
    start_weight: float
    end_date: str
    end_weight: float
    total_duration: int = 0  # days between start and end
    total_kg: float = 0.0  # start_weight - end_weight
    height: float = 0.0  # cm, only used for BMI

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TargetData":
        """Build a goal from the stored (camelCase) or snake_case shape."""
        duration = to_float(_pick(data, "totalDuration", "total_duration"))
        return cls(
            start_date=str(_pick(data, "startDate", "start_date") or ""),
            start_weight=to_float(_pick(data, "startWeight", "start_weight")) or 0.0,
            end_date=str(_pick(data, "endDate", "end_date") or ""),
            end_weight=to_float(_pick(data, "endWeight", "end_weight")) or 0.0,
            total_duration=int(duration) if duration is not None else 0,
            total_kg=to_float(_pick(data, "totalKg", "total_kg")) or 0.0,
            height=to_float(_pick(data, "height")) or 0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the storage shape."""
        return {
            "startDate": self.start_date,
            "startWeight": self.start_weight,
            "endDate": self.end_date,
            "endWeight": self.end_weight,
            "totalDuration": self.total_duration,
            "totalKg": self.total_kg,
            "height": self.height,
        }


# Goal used when nothing has been configured yet
DEFAULT_TARGET = TargetData(
    start_date="2025-09-28",
    start_weight=112.35,
    end_date="2026-07-31",
    end_weight=75.0,
    total_duration=306,
    total_kg=37.35,
    height=170.0,
)


@dataclass(frozen=True)
class BMICategory:
    """One band of the BMI table."""

    category: str
    min: float
    max: float  # display upper bound
    color: str
