"""
Shared pytest fixtures for the time travel tests.

- A QApplication on the offscreen platform (widgets and QObjects share it)
- A VirtualTimerBackend pinned to a known "now", so debounce windows and
  clock ticks are advanced by hand instead of waited for
- A controller factory bound to that backend and a signal recorder
"""

import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from timetravel.core.controller import NavigationController  # noqa: E402
from timetravel.core.state import TimeTravelConfig  # noqa: E402
from timetravel.scheduling.timers import VirtualTimerBackend  # noqa: E402

EARLIEST = "2020-01-01T00:00:00Z"
NOW = datetime(2020, 1, 11, tzinfo=timezone.utc)
NOW_TEXT = "2020-01-11T00:00:00Z"


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QApplication.instance() or QApplication([])
    return app


@pytest.fixture
def backend():
    return VirtualTimerBackend(NOW)


@pytest.fixture
def make_controller(backend):
    created = []

    def _make(**config):
        config.setdefault("earliest_timestamp", EARLIEST)
        controller = NavigationController(TimeTravelConfig(**config), backend=backend)
        created.append(controller)
        return controller

    yield _make
    for controller in created:
        controller.stop()


class SignalRecorder:
    """Collects everything a NavigationController emits."""

    def __init__(self, controller: NavigationController):
        self.timestamps = []
        self.ranges = []
        self.live = []
        self.zooms = []
        self.tracking = []
        self.states = []
        controller.changeTimestamp.connect(lambda t: self.timestamps.append(t))
        controller.changeRange.connect(lambda ms: self.ranges.append(ms))
        controller.changeLiveMode.connect(lambda on: self.live.append(on))
        controller.timelineZoom.connect(lambda p: self.zooms.append(p))
        controller.stateChanged.connect(lambda s: self.states.append(s))
        controller.timestampInputEdited.connect(lambda: self.tracking.append("input"))
        controller.timelinePanButtonClicked.connect(
            lambda: self.tracking.append("pan_button")
        )
        controller.timelineLabelClicked.connect(lambda: self.tracking.append("label"))
        controller.timelinePanned.connect(lambda: self.tracking.append("pan"))


@pytest.fixture
def record():
    return SignalRecorder
