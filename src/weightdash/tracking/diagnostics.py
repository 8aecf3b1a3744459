"""Diagnostics sink for records dropped during normalization.

Malformed historical rows are silently excluded from the working series so
one bad row never blocks the rest from loading. The exclusion is still
reported here so an operator can see what was lost.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DroppedRecord:
    """A record excluded from a computation."""

    source: str  # operation that dropped it, e.g. 'normalize_entries'
    reason: str
    record: Any = None


class DiagnosticsSink(Protocol):
    """Receiver for dropped-record notifications."""

    def record(self, event: DroppedRecord) -> None: ...


class LoggingDiagnostics:
    """Default sink: log each dropped record as a warning."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def record(self, event: DroppedRecord) -> None:
        self.log.warning("%s dropped record: %s (%r)", event.source, event.reason, event.record)


@dataclass
class CollectingDiagnostics:
    """Sink that keeps every event in memory."""

    events: list[DroppedRecord] = field(default_factory=list)

    def record(self, event: DroppedRecord) -> None:
        self.events.append(event)

    @property
    def reasons(self) -> list[str]:
        return [event.reason for event in self.events]

    def clear(self) -> None:
        self.events.clear()


def resolve_diagnostics(diagnostics: Optional[DiagnosticsSink]) -> DiagnosticsSink:
    """Return ``diagnostics`` or a logging sink."""
    return diagnostics if diagnostics is not None else LoggingDiagnostics()
