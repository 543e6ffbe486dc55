"""Core module initialization."""

from app.core.clock import Clock, FixedClock, SystemClock, get_clock

__all__ = ["Clock", "FixedClock", "SystemClock", "get_clock"]
