"""Injectable source of "now" for streak, consistency and projection logic."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol


class Clock(Protocol):
    """Anything that can report the current local time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


@dataclass(frozen=True)
class FixedClock:
    """Clock frozen at a given instant (used by tests and replays)."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant

    @classmethod
    def on(cls, day: date, hour: int = 12) -> "FixedClock":
        """Return a clock frozen at ``hour`` o'clock on ``day``."""
        return cls(datetime(day.year, day.month, day.day, hour))


SYSTEM_CLOCK = SystemClock()


def resolve_clock(clock: Optional[Clock]) -> Clock:
    """Return ``clock`` or the system clock when none was injected."""
    return clock if clock is not None else SYSTEM_CLOCK


def today(clock: Optional[Clock] = None) -> date:
    """Return the current calendar date according to ``clock``."""
    return resolve_clock(clock).now().date()
