"""Timeline bar UI component.

A thin view over a NavigationController: a tick strip that the user drags
(pan), scrolls (zoom) and double-clicks (jump), flanked by two pan buttons.
All state lives in the controller; the widgets only forward gestures and
repaint from ``stateChanged`` snapshots.

Rendering notes:
The focused timestamp is drawn at the horizontal centre. Tick spacing is
picked from a fixed ladder of calendar-ish intervals so that neighbouring
labels stay at least ``MIN_TICK_SPACING_PX`` apart. Timestamps beyond "now"
are shaded to show the unreachable future.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

import numpy as np
from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QHBoxLayout, QPushButton, QWidget

from ...core.controller import NavigationController
from ...core.scale import DAY_MS, HOUR_MS, MINUTE_MS, SECOND_MS, TimeScale
from ...core.state import TimelineState

MIN_TICK_SPACING_PX = 80
ZOOM_STEP = 1.1

_TICK_INTERVALS_MS = (
    SECOND_MS,
    5 * SECOND_MS,
    15 * SECOND_MS,
    30 * SECOND_MS,
    MINUTE_MS,
    5 * MINUTE_MS,
    15 * MINUTE_MS,
    30 * MINUTE_MS,
    HOUR_MS,
    3 * HOUR_MS,
    6 * HOUR_MS,
    12 * HOUR_MS,
    DAY_MS,
    7 * DAY_MS,
    30 * DAY_MS,
    365 * DAY_MS,
)


def tick_interval_ms(duration_ms_per_px: float) -> int:
    """Smallest ladder interval whose ticks are at least MIN_TICK_SPACING_PX apart."""
    for interval in _TICK_INTERVALS_MS:
        if interval / duration_ms_per_px >= MIN_TICK_SPACING_PX:
            return interval
    return _TICK_INTERVALS_MS[-1]


def tick_positions(scale: TimeScale, width_px: int) -> Tuple[np.ndarray, int]:
    """Pixel x positions (0..width) of ticks aligned to the chosen interval.

    Returns the positions and the interval used. The focus sits at width/2.
    """
    interval = tick_interval_ms(scale.duration_ms_per_px)
    half_span_ms = (width_px / 2.0) * scale.duration_ms_per_px
    focus_ms = scale.focused_timestamp.timestamp() * 1000.0
    first = np.ceil((focus_ms - half_span_ms) / interval) * interval
    last = focus_ms + half_span_ms
    if first > last:
        return np.empty(0), interval
    ticks_ms = np.arange(first, last + 1, interval, dtype=float)
    xs = (ticks_ms - focus_ms) / scale.duration_ms_per_px + width_px / 2.0
    return xs, interval


def _tick_label(timestamp: datetime, interval_ms: int) -> str:
    if interval_ms >= DAY_MS:
        return timestamp.strftime("%Y-%m-%d")
    if interval_ms >= MINUTE_MS:
        return timestamp.strftime("%H:%M")
    return timestamp.strftime("%H:%M:%S")


class _TimelineStrip(QWidget):
    """Draggable tick strip."""

    panStarted = Signal()

    def __init__(self, controller: NavigationController):
        super().__init__()
        self._controller = controller
        self._state: TimelineState = controller.snapshot()
        self._drag_origin_x: Optional[float] = None
        self._drag_origin_focus: Optional[datetime] = None
        self.setMinimumHeight(40)
        self.setMouseTracking(True)
        controller.stateChanged.connect(self._onState)

    def sizeHint(self):  # type: ignore[override]
        return QSize(400, 48)

    def _onState(self, state: TimelineState):
        self._state = state
        self.update()

    def _scale(self) -> TimeScale:
        return TimeScale(self._state.focused_timestamp, self._state.duration_ms_per_px)

    # --- Painting ---
    def paintEvent(self, event):  # type: ignore[override]
        p = QPainter(self)
        w = self.width()
        h = self.height()
        p.fillRect(self.rect(), QColor(245, 245, 248))
        scale = self._scale()
        centre = w / 2.0
        # Future (beyond now) shading
        now_x = centre + scale.pixel_offset(self._state.timestamp_now)
        if now_x < w:
            p.fillRect(int(max(0.0, now_x)), 0, w, h, QColor(225, 225, 230))
        xs, interval = tick_positions(scale, w)
        p.setPen(QPen(QColor(120, 120, 130), 1))
        for x in xs:
            p.drawLine(int(x), h - 12, int(x), h)
            label = _tick_label(scale.timestamp_at(x - centre), interval)
            p.drawText(int(x) + 3, h - 14, label)
        # Focus marker
        p.setPen(QPen(QColor(0, 136, 204), 2))
        p.drawLine(int(centre), 0, int(centre), h)
        p.end()

    # --- Gestures ---
    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_origin_x = event.position().x()
            self._drag_origin_focus = self._state.focused_timestamp
            self.panStarted.emit()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):  # type: ignore[override]
        if self._drag_origin_x is None or self._drag_origin_focus is None:
            return
        dx = event.position().x() - self._drag_origin_x
        # Dragging right reveals the past.
        origin = TimeScale(self._drag_origin_focus, self._state.duration_ms_per_px)
        self._controller.pan(origin.timestamp_at(-dx))

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if self._drag_origin_x is not None:
            self._drag_origin_x = None
            self._drag_origin_focus = None
            self._controller.pan_release()
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event):  # type: ignore[override]
        offset = event.position().x() - self.width() / 2.0
        self._controller.jump(self._scale().timestamp_at(offset))

    def wheelEvent(self, event):  # type: ignore[override]
        delta = event.angleDelta().y()
        if delta == 0:
            return
        factor = 1.0 / ZOOM_STEP if delta > 0 else ZOOM_STEP
        self._controller.zoom(self._state.duration_ms_per_px * factor)

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        self._controller.resize(self.width())


class TimelineBar(QWidget):
    """Composite bar: pan-left button, tick strip, pan-right button."""

    def __init__(self, controller: NavigationController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self.strip = _TimelineStrip(controller)
        self._btn_left = QPushButton("‹")
        self._btn_right = QPushButton("›")
        layout = QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)
        for b in (self._btn_left, self._btn_right):
            b.setFixedWidth(24)
        layout.addWidget(self._btn_left)
        layout.addWidget(self.strip, stretch=1)
        layout.addWidget(self._btn_right)
        self.setLayout(layout)
        self._btn_left.clicked.connect(lambda: controller.pan_button_step(-1))
        self._btn_right.clicked.connect(lambda: controller.pan_button_step(1))

    def buttons(self) -> List[QPushButton]:
        return [self._btn_left, self._btn_right]


__all__ = ["TimelineBar", "tick_interval_ms", "tick_positions"]
