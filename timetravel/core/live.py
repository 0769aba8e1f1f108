"""Sticky switch back into live mode.

After a pan is released (or a pan button clicked) the view snaps back to
live-follow when "now" would render close enough to the focus point. The
check is never made mid-drag, so dragging through "now" does not snap.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .scale import TimeScale
from .state import TimelineState

STICKY_LIVE_THRESHOLD_PX = 10


def should_switch_to_live(
    state: TimelineState,
    has_live_mode: bool,
    *,
    focused_timestamp: Optional[datetime] = None,
    duration_ms_per_px: Optional[float] = None,
) -> bool:
    """Return True if the hypothetical next state should enter live mode.

    ``focused_timestamp`` / ``duration_ms_per_px`` override the current
    state to describe the post-gesture view; omitted fields keep their
    current values.
    """
    if not has_live_mode or state.showing_live:
        return False
    if focused_timestamp is None:
        focused_timestamp = state.focused_timestamp
    if duration_ms_per_px is None:
        duration_ms_per_px = state.duration_ms_per_px
    offset = TimeScale(focused_timestamp, duration_ms_per_px).pixel_offset(
        state.timestamp_now
    )
    return abs(offset) < STICKY_LIVE_THRESHOLD_PX


__all__ = ["STICKY_LIVE_THRESHOLD_PX", "should_switch_to_live"]
