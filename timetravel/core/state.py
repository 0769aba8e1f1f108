"""Navigation state and per-session configuration.

``TimelineState`` is owned by a single NavigationController and mutated only
through its transitions. ``TimeTravelConfig`` is fixed for the lifetime of a
session and can be built from a dict, a JSON file or the environment.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..utils.timefmt import format_timestamp, parse_timestamp

DEFAULT_EARLIEST_TIMESTAMP = "2014-01-01T00:00:00Z"
DEFAULT_RANGE_MS = 3_600_000  # 1 hour


@dataclass
class TimelineState:
    timestamp_now: datetime
    focused_timestamp: datetime
    duration_ms_per_px: float
    range_ms: Optional[float] = None
    showing_live: bool = False
    timeline_width_px: int = 1

    def copy(self) -> "TimelineState":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestampNow": format_timestamp(self.timestamp_now),
            "focusedTimestamp": format_timestamp(self.focused_timestamp),
            "durationMsPerPixel": self.duration_ms_per_px,
            "rangeMs": self.range_ms,
            "showingLive": self.showing_live,
            "timelineWidthPx": self.timeline_width_px,
        }


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class TimeTravelConfig:
    earliest_timestamp: str = DEFAULT_EARLIEST_TIMESTAMP
    has_live_mode: bool = False
    showing_live: bool = True  # only relevant if live mode is enabled
    has_range_selector: bool = False
    range_ms: float = DEFAULT_RANGE_MS  # only relevant with the range selector
    timestamp: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Normalise once so every consumer sees the canonical form.
        object.__setattr__(
            self, "earliest_timestamp", format_timestamp(self.earliest_timestamp)
        )
        if self.timestamp is not None:
            object.__setattr__(self, "timestamp", format_timestamp(self.timestamp))
        if self.range_ms is None or self.range_ms <= 0:
            raise ValueError(f"range_ms must be positive, got {self.range_ms!r}")

    @property
    def earliest(self) -> datetime:
        return parse_timestamp(self.earliest_timestamp)

    @property
    def initial_showing_live(self) -> bool:
        return self.has_live_mode and self.showing_live

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeTravelConfig":
        return cls(
            earliest_timestamp=data.get(
                "earliest_timestamp", DEFAULT_EARLIEST_TIMESTAMP
            ),
            has_live_mode=bool(data.get("has_live_mode", False)),
            showing_live=bool(data.get("showing_live", True)),
            has_range_selector=bool(data.get("has_range_selector", False)),
            range_ms=data.get("range_ms", DEFAULT_RANGE_MS),
            timestamp=data.get("timestamp"),
            extra=data.get("extra", {}),
        )

    def save(self, path: str | Path) -> None:
        p = Path(path)
        p.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: str | Path) -> "TimeTravelConfig":
        p = Path(path)
        data = json.loads(p.read_text())
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls, base: Optional["TimeTravelConfig"] = None, environ=None
    ) -> "TimeTravelConfig":
        """Overlay TIMETRAVEL_* environment variables onto ``base``."""
        env = os.environ if environ is None else environ
        config = base or cls()
        overrides: dict[str, Any] = {}
        if env.get("TIMETRAVEL_EARLIEST"):
            overrides["earliest_timestamp"] = env["TIMETRAVEL_EARLIEST"]
        if env.get("TIMETRAVEL_LIVE_MODE") is not None:
            overrides["has_live_mode"] = _env_flag(env["TIMETRAVEL_LIVE_MODE"])
        if env.get("TIMETRAVEL_RANGE_SELECTOR") is not None:
            overrides["has_range_selector"] = _env_flag(
                env["TIMETRAVEL_RANGE_SELECTOR"]
            )
        if env.get("TIMETRAVEL_RANGE_MS"):
            try:
                overrides["range_ms"] = float(env["TIMETRAVEL_RANGE_MS"])
            except ValueError as e:
                raise ValueError(
                    f"TIMETRAVEL_RANGE_MS is not a number: {env['TIMETRAVEL_RANGE_MS']!r}"
                ) from e
        return replace(config, **overrides) if overrides else config


__all__ = [
    "DEFAULT_EARLIEST_TIMESTAMP",
    "DEFAULT_RANGE_MS",
    "TimelineState",
    "TimeTravelConfig",
]
