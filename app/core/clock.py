"""
Wall-clock access.

History analysis depends on "today" (the employment anchor and the
3-year residency threshold). The analyzer never reads the system clock
itself; callers obtain the current time from a Clock and pass it in.
"""

from datetime import datetime
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

from app.config import get_settings


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the system time in a configured zone."""

    def __init__(self, timezone: Optional[str] = None):
        self.tz = ZoneInfo(timezone or get_settings().timezone)

    def now(self) -> datetime:
        # Naive local time keeps comparisons with month boundaries simple
        return datetime.now(self.tz).replace(tzinfo=None)


class FixedClock:
    """Clock that always returns the same instant. Used by tests."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


_clock: Optional[SystemClock] = None


def get_clock() -> Clock:
    """Get the global system clock instance."""
    global _clock
    if _clock is None:
        _clock = SystemClock()
    return _clock
