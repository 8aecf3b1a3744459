"""Import status observers."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from weightdash.tracking.clock import Clock, resolve_clock

SYNC_STATUSES = ("idle", "syncing", "success", "error")

StatusListener = Callable[[str], None]


class SyncStatusRegistry:
    """Current import status plus the listeners interested in it.

    A registry is created by its owner and passed to the import functions;
    there is no shared module-level instance.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = resolve_clock(clock)
        self.status = "idle"
        self.last_sync_time: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._listeners: list[StatusListener] = []

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, status: str, error: Optional[str] = None) -> None:
        """Move to ``status`` and call every listener with it.

        Raises:
            ValueError: If ``status`` is not a known sync status
        """
        if status not in SYNC_STATUSES:
            raise ValueError(f"Unknown sync status: {status!r}")

        self.status = status
        if status == "success":
            self.last_sync_time = self.clock.now()
            self.last_error = None
        elif status == "error":
            self.last_error = error

        for listener in list(self._listeners):
            listener(status)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
