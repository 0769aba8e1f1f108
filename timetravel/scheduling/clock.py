"""Recurring one-second clock for a navigation session.

Each tick re-reads the current time from the backend instead of adding a
fixed step, so late or missed ticks never skew "now".
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class ClockDriver(QObject):
    ticked = Signal(object)  # datetime now (UTC)

    def __init__(
        self,
        backend,
        interval_ms: int = TICK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._backend = backend
        self._interval_ms = int(interval_ms)
        self._timer = backend.create_timer(self._tick, single_shot=False)
        self._running = False

    def start(self):
        if self._running:
            return
        self._running = True
        self._timer.start(self._interval_ms)
        logger.debug("clock started (%dms)", self._interval_ms)

    def stop(self):
        if not self._running:
            return
        self._running = False
        self._timer.stop()
        logger.debug("clock stopped")

    def is_running(self) -> bool:
        return self._running

    def now(self) -> datetime:
        return self._backend.now()

    def _tick(self):
        # A timeout already queued when stop() ran must not leak through.
        if not self._running:
            return
        self.ticked.emit(self._backend.now())


__all__ = ["TICK_INTERVAL_MS", "ClockDriver"]
