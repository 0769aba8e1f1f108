"""Timestamp formatting utilities.

All timestamps handled by the navigation core are timezone-aware UTC
datetimes truncated to whole seconds. Externally they travel as ISO-8601
strings in the canonical ``YYYY-MM-DDTHH:MM:SSZ`` form.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

__all__ = [
    "InvalidTimestampError",
    "TimestampLike",
    "utc_now",
    "to_utc",
    "parse_timestamp",
    "format_timestamp",
    "format_duration",
    "ms_between",
    "add_ms",
]

TimestampLike = Union[str, datetime]


class InvalidTimestampError(ValueError):
    """Raised when timestamp text cannot be interpreted."""


def utc_now() -> datetime:
    return to_utc(datetime.now(timezone.utc))


def to_utc(value: datetime) -> datetime:
    """Normalise to aware UTC, dropping sub-second precision.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


def parse_timestamp(value: Optional[TimestampLike]) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) into UTC.

    Accepts a trailing ``Z`` as well as explicit offsets and fractional
    seconds. Raises InvalidTimestampError for anything else.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidTimestampError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidTimestampError(f"invalid timestamp: {value!r}") from e
    return to_utc(parsed)


def format_timestamp(value: TimestampLike) -> str:
    """Return the canonical ``YYYY-MM-DDTHH:MM:SSZ`` representation."""
    return parse_timestamp(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def ms_between(start: datetime, end: datetime) -> float:
    """Milliseconds elapsed from ``start`` to ``end`` (negative if reversed)."""
    return (end - start) / timedelta(milliseconds=1)


def add_ms(value: datetime, ms: float) -> datetime:
    return value + timedelta(milliseconds=ms)


_DURATION_UNITS = (
    ("d", 86_400_000),
    ("h", 3_600_000),
    ("m", 60_000),
    ("s", 1000),
)


def format_duration(ms: float) -> str:
    """Compact label for a duration, e.g. ``1h``, ``2d 6h``, ``30s``.

    Only the two most significant non-zero units are shown. Negative values
    clamp to ``0s``.
    """
    remaining = max(0, int(ms))
    parts = []
    for suffix, unit_ms in _DURATION_UNITS:
        count, remaining = divmod(remaining, unit_ms)
        if count:
            parts.append(f"{count}{suffix}")
        if len(parts) == 2:
            break
    return " ".join(parts) if parts else "0s"
