"""
Time sources.

Components that compare against "now" take a Clock so tests can drive
time explicitly instead of sleeping.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Source of the current wall-clock time."""

    def now(self) -> float:
        """Seconds since the Unix epoch."""
        ...


class SystemClock:
    """Clock backed by time.time()."""

    def now(self) -> float:
        return time.time()


def epoch_seconds(clock: Clock) -> int:
    """Current time truncated to whole epoch seconds."""
    return int(clock.now())
