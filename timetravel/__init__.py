"""Top-level package exports.

Public API surface (keep minimal):
 - NavigationController, TimeTravelConfig, TimelineState (navigation core)
 - VirtualTimerBackend (deterministic timing for tests / headless hosts)
 - format_timestamp, parse_timestamp (timestamp helpers)

Widgets live under ``timetravel.ui`` and are not imported here.
"""

from .core.controller import NavigationController  # noqa: F401
from .core.state import TimelineState, TimeTravelConfig  # noqa: F401
from .scheduling.timers import VirtualTimerBackend  # noqa: F401
from .utils.timefmt import format_timestamp, parse_timestamp  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "NavigationController",
    "TimelineState",
    "TimeTravelConfig",
    "VirtualTimerBackend",
    "format_timestamp",
    "parse_timestamp",
]
