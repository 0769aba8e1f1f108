"""Timer backends for deferred work.

The navigation core never touches a timer class directly; it asks a backend
for a timer object exposing the small QTimer subset it needs
(``start(ms)``, ``stop()``, ``isActive()``, ``interval()``) plus ``now()``.

- ``QtTimerBackend`` hands out real ``QTimer`` instances driven by the Qt
  event loop and reads the wall clock.
- ``VirtualTimerBackend`` keeps a manual clock. Nothing fires until
  ``advance(ms)`` is called, which runs due timers in deadline order. Tests
  and headless hosts use it to step through debounce windows and ticks
  deterministically.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Qt, QTimer

from ..utils.timefmt import add_ms, to_utc, utc_now

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class QtTimerBackend:
    def __init__(self, parent: Optional[QObject] = None):
        self._parent = parent

    def create_timer(self, callback: TimerCallback, *, single_shot: bool) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(single_shot)
        # Coarse timers may fire up to 5% late, which is fine for debouncing.
        timer.setTimerType(Qt.TimerType.CoarseTimer)
        timer.timeout.connect(callback)
        return timer

    def now(self) -> datetime:
        return utc_now()


class VirtualTimer:
    """Manually driven stand-in for QTimer."""

    def __init__(
        self, backend: "VirtualTimerBackend", callback: TimerCallback, single_shot: bool
    ):
        self._backend = backend
        self._callback = callback
        self._single_shot = single_shot
        self._interval = 0
        self._deadline: Optional[float] = None

    def start(self, interval_ms: Optional[int] = None):
        if interval_ms is not None:
            self._interval = int(interval_ms)
        self._deadline = self._backend.elapsed_ms + self._interval

    def stop(self):
        self._deadline = None

    def isActive(self) -> bool:
        return self._deadline is not None

    def interval(self) -> int:
        return self._interval

    def isSingleShot(self) -> bool:
        return self._single_shot

    def remainingTime(self) -> int:
        if self._deadline is None:
            return -1
        return int(max(0.0, self._deadline - self._backend.elapsed_ms))

    # Backend hooks
    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def _fire(self):
        if self._single_shot:
            self._deadline = None
        else:
            # Never schedule at the same instant, even with a zero interval.
            self._deadline = self._backend.elapsed_ms + max(1, self._interval)
        self._callback()


class VirtualTimerBackend:
    def __init__(self, start: Optional[datetime] = None):
        self._start = to_utc(start) if start is not None else utc_now()
        self._elapsed_ms = 0.0
        self._timers: List[VirtualTimer] = []

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed_ms

    def create_timer(
        self, callback: TimerCallback, *, single_shot: bool
    ) -> VirtualTimer:
        timer = VirtualTimer(self, callback, single_shot)
        self._timers.append(timer)
        return timer

    def now(self) -> datetime:
        return to_utc(add_ms(self._start, self._elapsed_ms))

    def active_timers(self) -> List[VirtualTimer]:
        return [t for t in self._timers if t.isActive()]

    def advance(self, ms: float) -> int:
        """Move the clock forward, firing every timer that comes due.

        Timers fire in deadline order with the clock set to their deadline,
        so a callback that re-arms or cancels another timer is honoured
        within the same call. Returns the number of callbacks run.
        """
        target = self._elapsed_ms + ms
        fired = 0
        while True:
            due = [t for t in self._timers if t.isActive() and t.deadline <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.deadline)
            self._elapsed_ms = max(self._elapsed_ms, timer.deadline)
            timer._fire()
            fired += 1
        self._elapsed_ms = target
        if fired:
            logger.debug("virtual clock advanced %.0fms, fired %d timer(s)", ms, fired)
        return fired


__all__ = ["QtTimerBackend", "VirtualTimer", "VirtualTimerBackend"]
