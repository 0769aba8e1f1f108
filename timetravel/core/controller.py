"""Temporal navigation controller for the time-travel timeline.

Goals:
- Own the TimelineState of one navigation session and keep it inside its
  bounds after every gesture and every clock tick.
- Translate view-layer gestures (pan, release, zoom, jump, pan buttons,
  range changes, live toggle, resize) into state transitions.
- Coalesce high-frequency changes into debounced notifications for the
  host application.

Design:
NavigationController is a QObject; inputs are plain methods and outputs are
Qt signals, so any widget (or test) can drive it and listen to it.
    pan(timestamp)            drag in progress; notification debounced
    pan_release()             drag finished; may snap back to live
    zoom(duration_ms_per_px)  zoom gesture; telemetry debounced
    jump(timestamp)           label click; immediate commit
    pan_button(timestamp)     pan button click; immediate commit or live snap
    input_timestamp(text)     timestamp input box edit; immediate commit
    set_range(range_ms)       range selector; immediate
    toggle_live(bool)         live toggle; immediate
    resize(width_px)          viewport width update
    apply_external_update(..) host pushed new timestamp/range/live flag
    start() / stop()          session lifecycle (clock driver)
Signals:
    changeTimestamp(str)       canonical UTC timestamp
    changeRange(float)         range in ms
    changeLiveMode(bool)
    timelineZoom(object)       zoomed period label (or None)
    stateChanged(object)       TimelineState snapshot after each transition
plus fire-and-forget tracking signals for input edits, pan button clicks,
label clicks and pans.

Timing: two DebounceChannels (500ms timestamp changes, 5s zoom telemetry)
and a 1s ClockDriver, all created through a timer backend. The default
backend uses QTimer; pass a VirtualTimerBackend to step time manually.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..scheduling.clock import ClockDriver
from ..scheduling.debounce import DebounceChannel
from ..scheduling.timers import QtTimerBackend
from ..utils.timefmt import (
    InvalidTimestampError,
    TimestampLike,
    add_ms,
    format_timestamp,
    parse_timestamp,
)
from .live import should_switch_to_live
from .scale import (
    TimeScale,
    clamp_duration,
    clamp_timestamp,
    initial_duration_per_px,
    max_duration_per_px,
    min_duration_per_px,
    zoomed_period,
)
from .state import TimelineState, TimeTravelConfig

logger = logging.getLogger(__name__)

CHANGE_DELAY_MS = 500
ZOOM_REPORT_DELAY_MS = 5000
# Selected range renders over one third of the timeline.
RANGE_VIEWPORT_FRACTION = 3
# Pan buttons move the view by a quarter of the timeline.
PAN_BUTTON_FRACTION = 4


class NavigationController(QObject):
    changeTimestamp = Signal(str)
    changeRange = Signal(float)
    changeLiveMode = Signal(bool)
    timelineZoom = Signal(object)
    stateChanged = Signal(object)
    # Tracking hooks; not part of the state logic.
    timestampInputEdited = Signal()
    timelinePanButtonClicked = Signal()
    timelineLabelClicked = Signal()
    timelinePanned = Signal()

    def __init__(
        self,
        config: Optional[TimeTravelConfig] = None,
        backend=None,
        parent: Optional[QObject] = None,
        *,
        change_delay_ms: int = CHANGE_DELAY_MS,
        zoom_report_delay_ms: int = ZOOM_REPORT_DELAY_MS,
    ):
        super().__init__(parent)
        self._config = config or TimeTravelConfig()
        self._backend = backend if backend is not None else QtTimerBackend(self)
        self._earliest = self._config.earliest
        now = self._backend.now()
        showing_live = self._config.initial_showing_live
        if showing_live or self._config.timestamp is None:
            focused = now
        else:
            focused = clamp_timestamp(
                parse_timestamp(self._config.timestamp), self._earliest, now
            )
        self._state = TimelineState(
            timestamp_now=now,
            focused_timestamp=focused,
            duration_ms_per_px=initial_duration_per_px(self._earliest, now),
            range_ms=self._config.range_ms,
            showing_live=showing_live,
            timeline_width_px=1,
        )
        # Last live flag pushed by the host (gates external timestamp updates).
        self._external_showing_live = self._config.showing_live

        self._change_channel = DebounceChannel(
            self._backend, change_delay_ms, name="timestamp-change", parent=self
        )
        self._change_channel.triggered.connect(self._deliverTimestamp)
        self._zoom_channel = DebounceChannel(
            self._backend, zoom_report_delay_ms, name="zoom-telemetry", parent=self
        )
        self._zoom_channel.triggered.connect(self._reportZoom)
        self._clock = ClockDriver(self._backend, parent=self)
        self._clock.ticked.connect(self._onTick)

    # --- Lifecycle ---
    def start(self):
        """Begin ticking. Idempotent."""
        if self._clock.is_running():
            return
        self._clock.start()
        logger.info(
            "navigation session started (earliest=%s, live=%s)",
            self._config.earliest_timestamp,
            self._state.showing_live,
        )

    def stop(self):
        """End the session: no further ticks, pending deliveries dropped."""
        was_running = self._clock.is_running()
        self._clock.stop()
        self._change_channel.cancel()
        self._zoom_channel.cancel()
        if was_running:
            logger.info("navigation session stopped")

    def is_running(self) -> bool:
        return self._clock.is_running()

    def flush_pending(self):
        """Deliver any pending debounced timestamp change and zoom report now."""
        self._change_channel.flush()
        self._zoom_channel.flush()

    # --- Accessors ---
    @property
    def config(self) -> TimeTravelConfig:
        return self._config

    @property
    def has_live_mode(self) -> bool:
        return self._config.has_live_mode

    @property
    def timestamp(self) -> str:
        return format_timestamp(self._state.focused_timestamp)

    @property
    def timestamp_now(self) -> str:
        return format_timestamp(self._state.timestamp_now)

    @property
    def focused_timestamp(self) -> datetime:
        return self._state.focused_timestamp

    @property
    def duration_ms_per_px(self) -> float:
        return self._state.duration_ms_per_px

    @property
    def range_ms(self) -> Optional[float]:
        return self._state.range_ms

    @property
    def showing_live(self) -> bool:
        return self._state.showing_live

    @property
    def timeline_width_px(self) -> int:
        return self._state.timeline_width_px

    def snapshot(self) -> TimelineState:
        return self._state.copy()

    def time_scale(self) -> TimeScale:
        return TimeScale(self._state.focused_timestamp, self._state.duration_ms_per_px)

    def zoom_bounds(self) -> tuple[float, float]:
        return (
            min_duration_per_px(),
            max_duration_per_px(self._earliest, self._state.timestamp_now),
        )

    def range_start(self) -> Optional[datetime]:
        """Start of the selected range (which ends at the focused timestamp)."""
        if not self._config.has_range_selector or self._state.range_ms is None:
            return None
        return add_ms(self._state.focused_timestamp, -self._state.range_ms)

    def has_pending_change(self) -> bool:
        return self._change_channel.pending()

    # --- Gestures ---
    def pan(self, timestamp: TimestampLike):
        focused = self._clampedTimestamp(timestamp)
        self._state.showing_live = False
        self._state.focused_timestamp = focused
        self._change_channel.schedule(format_timestamp(focused))
        self._emitState()

    def pan_release(self):
        if should_switch_to_live(self._state, self.has_live_mode):
            logger.debug("pan released near now; switching to live")
            self._state.showing_live = True
            self._setFocusedTimestamp(self._state.timestamp_now)
        self._emitState()
        self.timelinePanned.emit()

    def zoom(self, duration_ms_per_px: float):
        duration = self._clampedDuration(duration_ms_per_px)
        self._state.duration_ms_per_px = duration
        self._zoom_channel.schedule()
        self._emitState()

    def jump(self, timestamp: TimestampLike):
        self._state.showing_live = False
        self._setFocusedTimestamp(timestamp)
        # Jumping onto the pending pan target: deliver it now, not later.
        self._change_channel.flush()
        self._emitState()
        self.timelineLabelClicked.emit()

    def pan_button(self, timestamp: TimestampLike):
        candidate = self._clampedTimestamp(timestamp)
        if should_switch_to_live(
            self._state, self.has_live_mode, focused_timestamp=candidate
        ):
            logger.debug("pan button landed near now; switching to live")
            self._state.showing_live = True
            self._setFocusedTimestamp(self._state.timestamp_now)
        else:
            self._state.showing_live = False
            self._setFocusedTimestamp(candidate)
        self._emitState()
        self.timelinePanButtonClicked.emit()

    def pan_button_step(self, direction: int):
        """Pan by a quarter of the timeline width; ``direction`` is -1 or +1."""
        sign = 1 if direction > 0 else -1
        px = sign * self._state.timeline_width_px / PAN_BUTTON_FRACTION
        self.pan_button(self.time_scale().timestamp_at(px))

    def input_timestamp(self, text: str) -> bool:
        """Commit a timestamp typed into the input box.

        Returns False (and leaves everything untouched) if the text does not
        parse.
        """
        try:
            timestamp = parse_timestamp(text)
        except InvalidTimestampError as e:
            logger.warning("ignoring timestamp input: %s", e)
            return False
        self._setFocusedTimestamp(timestamp)
        self._emitState()
        self.timestampInputEdited.emit()
        return True

    def set_range(self, range_ms: float):
        if range_ms is None or range_ms <= 0:
            logger.warning("ignoring non-positive range %r", range_ms)
            return
        timeline_third = self._state.timeline_width_px / RANGE_VIEWPORT_FRACTION
        self._state.range_ms = float(range_ms)
        self._state.duration_ms_per_px = self._clampedDuration(range_ms / timeline_third)
        self._emitState()
        self.changeRange.emit(float(range_ms))

    def toggle_live(self, showing_live: bool):
        if not self.has_live_mode:
            logger.debug("live mode unavailable; toggle ignored")
            return
        showing_live = bool(showing_live)
        self._state.showing_live = showing_live
        if showing_live:
            self._change_channel.cancel()
            self._state.focused_timestamp = self._state.timestamp_now
        else:
            # The paused focus is kept, so the host must still hear about it.
            self._change_channel.flush()
        self._emitState()
        self.changeLiveMode.emit(showing_live)

    def resize(self, width_px: int):
        self._state.timeline_width_px = max(1, int(width_px))
        self._emitState()

    def tick(self, now: Optional[datetime] = None):
        """Advance "now"; in live mode the focus follows it."""
        self._onTick(self._clock.now() if now is None else now)

    def apply_external_update(
        self,
        timestamp: Optional[TimestampLike] = None,
        range_ms: Optional[float] = None,
        showing_live: Optional[bool] = None,
    ) -> bool:
        """Accept host-pushed props. Returns True if the focus was updated.

        Ignored while either side is in live mode, right after the host
        switched from live to paused (the latest live timestamp is kept),
        and while a debounced change of our own is still pending.
        """
        previous_live = self._external_showing_live
        next_live = previous_live if showing_live is None else bool(showing_live)
        self._external_showing_live = next_live
        if self.has_live_mode and (next_live or self._state.showing_live):
            return False
        if previous_live and not next_live:
            return False
        if timestamp is None:
            return False
        if self._change_channel.pending():
            logger.debug("external timestamp ignored; local change pending")
            return False
        self._state.focused_timestamp = self._clampedTimestamp(timestamp)
        if range_ms is not None:
            self._state.range_ms = float(range_ms)
        self._emitState()
        return True

    # --- Internal ---
    def _clampedTimestamp(self, raw: TimestampLike) -> datetime:
        candidate = parse_timestamp(raw)
        clamped = clamp_timestamp(candidate, self._earliest, self._state.timestamp_now)
        if clamped != candidate:
            logger.debug("timestamp %s clamped to %s", candidate, clamped)
        return clamped

    def _clampedDuration(self, duration: float) -> float:
        clamped = clamp_duration(duration, self._earliest, self._state.timestamp_now)
        if clamped != duration:
            logger.debug("zoom %.1fms/px clamped to %.1fms/px", duration, clamped)
        return clamped

    def _setFocusedTimestamp(self, timestamp: TimestampLike):
        """Immediate commit: supersedes any pending debounced change."""
        focused = self._clampedTimestamp(timestamp)
        if focused != self._state.focused_timestamp:
            self._change_channel.cancel()
            self._state.focused_timestamp = focused
            self.changeTimestamp.emit(format_timestamp(focused))

    def _onTick(self, now: datetime):
        self._state.timestamp_now = now
        if self.has_live_mode and self._state.showing_live:
            self._state.focused_timestamp = now
        else:
            # A clock stepping backwards must not leave the focus in the future.
            self._setFocusedTimestamp(self._state.focused_timestamp)
        self._state.duration_ms_per_px = self._clampedDuration(
            self._state.duration_ms_per_px
        )
        self._emitState()

    def _deliverTimestamp(self, value: str):
        self.changeTimestamp.emit(value)

    def _reportZoom(self, _value=None):
        period = zoomed_period(self._state.duration_ms_per_px)
        logger.debug("zoom settled on %s", period)
        self.timelineZoom.emit(period)

    def _emitState(self):
        self.stateChanged.emit(self._state.copy())


__all__ = ["NavigationController", "CHANGE_DELAY_MS", "ZOOM_REPORT_DELAY_MS"]
