"""Coalescing delivery channel.

A DebounceChannel holds at most one pending value. Each ``schedule`` call
replaces the pending value and restarts the delay, so only the last value
of a burst is delivered, ``delay_ms`` after the burst ends. ``cancel``
drops the pending value; a delivery that was already due but had not run
yet is discarded as well (generation check, same idea as the stale-result
guard used by the background workers in the UI layer).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)

_NOTHING = object()


class DebounceChannel(QObject):
    triggered = Signal(object)  # delivered value

    def __init__(
        self,
        backend,
        delay_ms: int,
        name: str = "debounce",
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._name = name
        self._delay_ms = int(delay_ms)
        self._pending: Any = _NOTHING
        self._gen = 0
        self._armed_gen = 0
        self._timer = backend.create_timer(self._onTimeout, single_shot=True)

    @property
    def name(self) -> str:
        return self._name

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def pending(self) -> bool:
        return self._pending is not _NOTHING

    def pending_value(self) -> Any:
        return None if self._pending is _NOTHING else self._pending

    def schedule(self, value: Any = None):
        self._gen += 1
        self._armed_gen = self._gen
        self._pending = value
        self._timer.start(self._delay_ms)
        logger.debug("[%s] scheduled %r (gen=%d)", self._name, value, self._gen)

    def cancel(self) -> bool:
        """Drop the pending value. Returns True if something was pending."""
        had_pending = self.pending()
        self._gen += 1
        self._pending = _NOTHING
        self._timer.stop()
        if had_pending:
            logger.debug("[%s] cancelled pending delivery", self._name)
        return had_pending

    def flush(self) -> bool:
        """Deliver the pending value now. Returns True if one was delivered."""
        if not self.pending():
            return False
        value = self._pending
        self.cancel()
        self.triggered.emit(value)
        return True

    def _onTimeout(self):
        if self._armed_gen != self._gen or not self.pending():
            return  # stale
        value = self._pending
        self._pending = _NOTHING
        logger.debug("[%s] delivering %r", self._name, value)
        self.triggered.emit(value)


__all__ = ["DebounceChannel"]
