"""Pixel/time mapping and zoom bounds for the time-travel timeline.

Pure functions only. Zoom is expressed as milliseconds per horizontal pixel
(``duration_ms_per_px``); a :class:`TimeScale` maps timestamps to pixel
offsets relative to the focused timestamp, which always renders at x=0.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils.timefmt import add_ms, ms_between

__all__ = [
    "SECOND_MS",
    "MINUTE_MS",
    "HOUR_MS",
    "DAY_MS",
    "MAX_TICK_SPACING_PX",
    "TimeScale",
    "clamp",
    "available_duration_ms",
    "min_duration_per_px",
    "max_duration_per_px",
    "initial_duration_per_px",
    "clamp_timestamp",
    "clamp_duration",
    "zoomed_period",
]

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

# Span of history that fits the fully zoomed-out view.
FULL_HISTORY_WIDTH_PX = 400.0
MAX_ZOOM_OUT_MS_PER_PX = 3 * DAY_MS
INITIAL_ZOOM_FRACTION = 0.1
MAX_INITIAL_MS_PER_PX = MINUTE_MS
# Widest spacing between two labelled ticks; used to classify zoom telemetry.
MAX_TICK_SPACING_PX = 415


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


@dataclass(frozen=True)
class TimeScale:
    """Linear mapping between timestamps and pixel offsets from the focus."""

    focused_timestamp: datetime
    duration_ms_per_px: float

    def pixel_offset(self, timestamp: datetime) -> float:
        return ms_between(self.focused_timestamp, timestamp) / self.duration_ms_per_px

    def timestamp_at(self, px: float) -> datetime:
        return add_ms(self.focused_timestamp, px * self.duration_ms_per_px)

    __call__ = pixel_offset


def available_duration_ms(earliest: datetime, now: datetime) -> float:
    return ms_between(earliest, now)


def min_duration_per_px() -> float:
    """Finest zoom: 2px per second."""
    return 500.0


def max_duration_per_px(earliest: datetime, now: datetime) -> float:
    """Zoom at which all available history fits 400px, at most 3 days/px."""
    duration_ms = available_duration_ms(earliest, now) / FULL_HISTORY_WIDTH_PX
    return clamp(duration_ms, min_duration_per_px(), MAX_ZOOM_OUT_MS_PER_PX)


def initial_duration_per_px(earliest: datetime, now: datetime) -> float:
    """A tenth of the max zoom-out, capped at one minute per pixel."""
    duration_ms = max_duration_per_px(earliest, now) * INITIAL_ZOOM_FRACTION
    return clamp(duration_ms, min_duration_per_px(), MAX_INITIAL_MS_PER_PX)


def clamp_timestamp(candidate: datetime, earliest: datetime, now: datetime) -> datetime:
    # Upper bound wins if earliest lies in the future.
    if candidate < earliest:
        candidate = earliest
    if candidate > now:
        candidate = now
    return candidate


def clamp_duration(candidate: float, earliest: datetime, now: datetime) -> float:
    return clamp(
        float(candidate), min_duration_per_px(), max_duration_per_px(earliest, now)
    )


# Calendar-average month length: 146097 days per 4800 months (400 Gregorian years).
_DAYS_PER_400_YEARS = 146097
_MONTHS_PER_400_YEARS = 4800


def zoomed_period(duration_ms_per_px: float) -> Optional[str]:
    """Coarsest calendar unit visible between two widest-spaced ticks.

    Returns one of ``years, months, weeks, days, hours, minutes, seconds``,
    or None when the projected span is shorter than a second.
    """
    span_ms = int(duration_ms_per_px * MAX_TICK_SPACING_PX)
    days, rem = divmod(span_ms, DAY_MS)
    months = days * _MONTHS_PER_400_YEARS // _DAYS_PER_400_YEARS
    if months // 12:
        return "years"
    if months:
        return "months"
    if days // 7:
        return "weeks"
    if days:
        return "days"
    if rem // HOUR_MS:
        return "hours"
    if rem // MINUTE_MS:
        return "minutes"
    if rem // SECOND_MS:
        return "seconds"
    return None
