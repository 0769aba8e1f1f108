"""Time travel panel.

Terminology:
- Timeline bar: tick strip + pan buttons (gestures in, snapshots out)
- Time controls: live toggle, timestamp input, range selector

``TimeTravelPanel`` assembles one NavigationController with its bar and
controls and owns the session lifecycle: the clock starts when the panel
is shown and stops when it is closed or hidden.

Public API:
    controller (NavigationController)
    timeline (TimelineBar)
    controls (TimeControls)
    startSession() / stopSession()
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from ...core.controller import NavigationController
from ...core.state import TimeTravelConfig
from .time_controls import TimeControls
from .timeline_bar import TimelineBar


class TimeTravelPanel(QWidget):
    def __init__(
        self,
        config: Optional[TimeTravelConfig] = None,
        parent=None,
        *,
        backend=None,
        label: str | None = None,
    ):
        super().__init__(parent)
        self.controller = NavigationController(config, backend=backend, parent=self)
        self.timeline = TimelineBar(self.controller)
        self.controls = TimeControls(self.controller)
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        if label:
            lbl = QLabel(label)
            lbl.setStyleSheet("color:#666;font-size:11px;padding:2px 4px;")
            layout.addWidget(lbl)
        layout.addWidget(self.timeline)
        layout.addWidget(self.controls)
        self.setLayout(layout)

    def startSession(self):
        self.controller.start()

    def stopSession(self):
        self.controller.stop()

    def showEvent(self, event):  # type: ignore[override]
        super().showEvent(event)
        self.startSession()

    def hideEvent(self, event):  # type: ignore[override]
        self.stopSession()
        super().hideEvent(event)

    def closeEvent(self, event):  # type: ignore[override]
        self.stopSession()
        super().closeEvent(event)


__all__ = ["TimeTravelPanel"]
