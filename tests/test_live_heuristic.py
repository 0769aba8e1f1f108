from datetime import datetime, timedelta, timezone

from timetravel.core.live import should_switch_to_live
from timetravel.core.state import TimelineState

NOW = datetime(2020, 1, 11, tzinfo=timezone.utc)


def _state(offset_px, showing_live=False, ms_per_px=60_000.0):
    return TimelineState(
        timestamp_now=NOW,
        focused_timestamp=NOW - timedelta(milliseconds=offset_px * ms_per_px),
        duration_ms_per_px=ms_per_px,
        showing_live=showing_live,
    )


def test_close_to_now_recommends_live():
    assert should_switch_to_live(_state(3), has_live_mode=True)
    assert should_switch_to_live(_state(0), has_live_mode=True)


def test_ten_pixels_or_more_stays_paused():
    assert not should_switch_to_live(_state(10), has_live_mode=True)
    assert not should_switch_to_live(_state(250), has_live_mode=True)


def test_requires_live_mode_support():
    assert not should_switch_to_live(_state(0), has_live_mode=False)


def test_not_recommended_when_already_live():
    assert not should_switch_to_live(_state(0, showing_live=True), has_live_mode=True)


def test_hypothetical_overrides():
    state = _state(500)
    near = NOW - timedelta(minutes=5)
    assert should_switch_to_live(state, True, focused_timestamp=near)
    # Zooming out far enough also brings now within reach.
    assert should_switch_to_live(state, True, duration_ms_per_px=60_000.0 * 100)
    # The state itself is not modified.
    assert state.focused_timestamp == NOW - timedelta(minutes=500)
