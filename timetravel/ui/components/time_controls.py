"""Time controls row: live toggle, timestamp input and range selector.

The live toggle only exists when the session has live mode, the range
selector only when it has range selection. The timestamp input is disabled
while live. An unparseable entry is reverted to the current focus.
"""

from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLineEdit, QPushButton, QWidget

from ...core.controller import NavigationController
from ...core.scale import DAY_MS, HOUR_MS, MINUTE_MS
from ...core.state import TimelineState
from ...utils.timefmt import format_duration, format_timestamp

RANGE_CHOICES_MS = (
    5 * MINUTE_MS,
    15 * MINUTE_MS,
    HOUR_MS,
    3 * HOUR_MS,
    6 * HOUR_MS,
    DAY_MS,
    7 * DAY_MS,
)


class TimeControls(QWidget):
    def __init__(self, controller: NavigationController, parent=None):
        super().__init__(parent)
        self._controller = controller
        config = controller.config
        layout = QHBoxLayout()
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(4)

        self.live_toggle = None
        if config.has_live_mode:
            self.live_toggle = QPushButton("Live")
            self.live_toggle.setCheckable(True)
            self.live_toggle.setChecked(controller.showing_live)
            self.live_toggle.toggled.connect(controller.toggle_live)
            layout.addWidget(self.live_toggle)

        self.timestamp_input = QLineEdit(controller.timestamp)
        self.timestamp_input.setMinimumWidth(170)
        self.timestamp_input.editingFinished.connect(self._onInputCommitted)
        layout.addWidget(self.timestamp_input)

        self.range_selector = None
        if config.has_range_selector:
            self.range_selector = QComboBox()
            choices = list(RANGE_CHOICES_MS)
            if int(controller.range_ms) not in choices:
                choices.append(int(controller.range_ms))
                choices.sort()
            for ms in choices:
                self.range_selector.addItem(format_duration(ms), ms)
            self.range_selector.setCurrentIndex(choices.index(int(controller.range_ms)))
            self.range_selector.activated.connect(self._onRangeActivated)
            layout.addWidget(self.range_selector)

        self.setLayout(layout)
        controller.stateChanged.connect(self._onState)
        self._onState(controller.snapshot())

    def _onInputCommitted(self):
        text = self.timestamp_input.text()
        if text == self._controller.timestamp:
            # Focus left the box without an edit.
            return
        if not self._controller.input_timestamp(text):
            self.timestamp_input.setText(self._controller.timestamp)

    def _onRangeActivated(self, index: int):
        self._controller.set_range(self.range_selector.itemData(index))

    def _onState(self, state: TimelineState):
        live = self._controller.has_live_mode and state.showing_live
        if not self.timestamp_input.hasFocus():
            self.timestamp_input.setText(format_timestamp(state.focused_timestamp))
        self.timestamp_input.setEnabled(not live)
        if self.live_toggle is not None and self.live_toggle.isChecked() != live:
            self.live_toggle.blockSignals(True)
            try:
                self.live_toggle.setChecked(live)
            finally:
                self.live_toggle.blockSignals(False)


__all__ = ["TimeControls", "RANGE_CHOICES_MS"]
