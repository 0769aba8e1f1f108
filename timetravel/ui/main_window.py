"""Demo window hosting a time travel session.

Shows a TimeTravelPanel and echoes every notification the controller
delivers into a log list and the status bar.
"""

from __future__ import annotations

import logging
import os
import sys

from PySide6.QtGui import QAction, QGuiApplication
from PySide6.QtWidgets import (
    QApplication,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..core.state import TimeTravelConfig
from ..logging_config import setup_logging
from .components.time_travel_panel import TimeTravelPanel

logger = logging.getLogger(__name__)

MAX_EVENT_ROWS = 200


class MainWindow(QMainWindow):
    def __init__(self, config: TimeTravelConfig | None = None, *, backend=None):
        super().__init__()
        self.setWindowTitle("Time Travel")
        self.setGeometry(100, 100, 800, 300)
        self._createMenuBar()
        self._createLayout(config or TimeTravelConfig(), backend)

    def centerOnPreferredScreen(self):
        """Center the window on TIMETRAVEL_SCREEN_INDEX, else the primary screen."""
        screens = QGuiApplication.screens()
        if not screens:
            return
        screen = None
        idx_env = os.getenv("TIMETRAVEL_SCREEN_INDEX")
        if idx_env is not None:
            try:
                idx = int(idx_env)
            except ValueError:
                logger.warning("TIMETRAVEL_SCREEN_INDEX is not an integer: %r", idx_env)
            else:
                if 0 <= idx < len(screens):
                    screen = screens[idx]
        if screen is None:
            screen = QGuiApplication.primaryScreen() or screens[0]
        geo = screen.availableGeometry()
        win_geo = self.frameGeometry()
        win_geo.moveCenter(geo.center())
        self.move(win_geo.topLeft())

    def _createMenuBar(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("File")
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)
        about_menu = menu_bar.addMenu("About")
        about_action = QAction("About Time Travel", self)
        about_action.triggered.connect(self._showAboutDialog)
        about_menu.addAction(about_action)

    def _showAboutDialog(self):
        QMessageBox.about(
            self,
            "About Time Travel",
            "Time Travel\nNavigate a bounded, live-following view of time.",
        )

    def _createLayout(self, config: TimeTravelConfig, backend):
        central_widget = QWidget()
        root_layout = QVBoxLayout()
        self.panel = TimeTravelPanel(config, self, backend=backend)
        self.controller = self.panel.controller
        root_layout.addWidget(self.panel)
        self.event_log = QListWidget()
        root_layout.addWidget(self.event_log, stretch=1)
        central_widget.setLayout(root_layout)
        self.setCentralWidget(central_widget)
        self.setStatusBar(QStatusBar())

        c = self.controller
        c.changeTimestamp.connect(self._onTimestampChanged)
        c.changeRange.connect(lambda ms: self._logEvent(f"range -> {ms:.0f}ms"))
        c.changeLiveMode.connect(lambda live: self._logEvent(f"live -> {live}"))
        c.timelineZoom.connect(lambda period: self._logEvent(f"zoom settled on {period}"))

    def _onTimestampChanged(self, timestamp: str):
        self.statusBar().showMessage(f"Focused: {timestamp}")
        self._logEvent(f"timestamp -> {timestamp}")

    def _logEvent(self, text: str):
        self.event_log.addItem(text)
        while self.event_log.count() > MAX_EVENT_ROWS:
            self.event_log.takeItem(0)
        self.event_log.scrollToBottom()

    def closeEvent(self, event):  # type: ignore[override]
        self.panel.stopSession()
        super().closeEvent(event)


def run():  # convenience launcher
    setup_logging()
    app = QApplication(sys.argv)
    config = TimeTravelConfig.from_env(TimeTravelConfig(has_live_mode=True))
    window = MainWindow(config)
    window.show()
    window.centerOnPreferredScreen()
    sys.exit(app.exec())


__all__ = ["MainWindow", "run"]
