import numpy as np
import pytest

from timetravel.core.scale import TimeScale
from timetravel.core.state import TimeTravelConfig
from timetravel.scheduling.timers import VirtualTimerBackend
from timetravel.ui.components.time_travel_panel import TimeTravelPanel
from timetravel.ui.components.timeline_bar import tick_interval_ms, tick_positions
from timetravel.ui.main_window import MainWindow

from conftest import EARLIEST, NOW, NOW_TEXT


def _panel(**config):
    config.setdefault("earliest_timestamp", EARLIEST)
    backend = VirtualTimerBackend(NOW)
    panel = TimeTravelPanel(TimeTravelConfig(**config), backend=backend)
    return panel, backend


def test_tick_interval_respects_min_spacing():
    assert tick_interval_ms(1000) == 300_000  # 5 minutes -> 300px
    assert tick_interval_ms(500) == 60_000  # 1 minute -> 120px
    assert tick_interval_ms(10**12) == 365 * 86_400_000


def test_tick_positions_centre_on_focus():
    xs, interval = tick_positions(TimeScale(NOW, 1000.0), 400)
    assert interval == 300_000
    assert np.allclose(xs, [200.0])
    xs, _ = tick_positions(TimeScale(NOW, 500.0), 400)
    # One-minute ticks every 120px around the centre.
    assert np.allclose(xs, [80.0, 200.0, 320.0])


def test_pan_buttons_drive_controller():
    panel, _ = _panel()
    received = []
    panel.controller.changeTimestamp.connect(lambda t: received.append(t))
    left, right = panel.timeline.buttons()
    left.click()
    assert panel.controller.timestamp < NOW_TEXT
    right.click()
    assert panel.controller.timestamp == NOW_TEXT
    assert len(received) == 2
    panel.stopSession()


def test_invalid_input_is_reverted():
    panel, _ = _panel()
    panel.controller.jump("2020-01-05T00:00:00Z")
    field = panel.controls.timestamp_input
    field.setText("tomorrow-ish")
    field.editingFinished.emit()
    assert field.text() == "2020-01-05T00:00:00Z"
    assert panel.controller.timestamp == "2020-01-05T00:00:00Z"


def test_unchanged_input_is_not_committed():
    panel, _ = _panel()
    edits = []
    panel.controller.timestampInputEdited.connect(lambda: edits.append(True))
    panel.controls.timestamp_input.editingFinished.emit()
    assert edits == []
    assert panel.controller.timestamp == NOW_TEXT


def test_valid_input_commits():
    panel, _ = _panel()
    field = panel.controls.timestamp_input
    field.setText("2020-01-07T12:00:00Z")
    field.editingFinished.emit()
    assert panel.controller.timestamp == "2020-01-07T12:00:00Z"


def test_live_toggle_controls_input():
    panel, _ = _panel(has_live_mode=True)
    controls = panel.controls
    assert controls.live_toggle is not None and controls.live_toggle.isChecked()
    assert not controls.timestamp_input.isEnabled()
    controls.live_toggle.setChecked(False)
    assert panel.controller.showing_live is False
    assert controls.timestamp_input.isEnabled()
    # Programmatic live switch is mirrored on the button.
    panel.controller.toggle_live(True)
    assert controls.live_toggle.isChecked()


def test_optional_controls_hidden_by_default():
    panel, _ = _panel()
    assert panel.controls.live_toggle is None
    assert panel.controls.range_selector is None


def test_range_selector_sets_range():
    panel, _ = _panel(has_range_selector=True)
    selector = panel.controls.range_selector
    assert selector.currentData() == 3_600_000
    ranges = []
    panel.controller.changeRange.connect(lambda ms: ranges.append(ms))
    selector.activated.emit(0)
    assert ranges == [300_000.0]
    assert panel.controller.range_ms == 300_000


def test_range_selector_includes_custom_range():
    panel, _ = _panel(has_range_selector=True, range_ms=120_000)
    assert panel.controls.range_selector.currentData() == 120_000


def test_panel_session_follows_visibility():
    panel, backend = _panel(has_live_mode=True)
    panel.show()
    assert panel.controller.is_running()
    backend.advance(2000)
    assert panel.controller.timestamp == "2020-01-11T00:00:02Z"
    panel.close()
    assert not panel.controller.is_running()
    backend.advance(5000)
    assert panel.controller.timestamp_now == "2020-01-11T00:00:02Z"


@pytest.fixture
def window():
    w = MainWindow(TimeTravelConfig(earliest_timestamp=EARLIEST, has_live_mode=True),
                   backend=VirtualTimerBackend(NOW))
    yield w
    w.close()


def test_main_window_logs_deliveries(window):
    window.controller.jump("2020-01-02T00:00:00Z")
    assert window.statusBar().currentMessage() == "Focused: 2020-01-02T00:00:00Z"
    texts = [window.event_log.item(i).text() for i in range(window.event_log.count())]
    assert texts == ["timestamp -> 2020-01-02T00:00:00Z"]
