"""Timer package."""

from .engine import (
    SessionEngine,
    SETTINGS_KEY,
    STATE_KEY,
    AUTO_START_DELAY,
)
from .models import SessionType, SessionState, TimerSettings, SETTING_RANGES
from .clock import Clock, QtClock, Subscription

__all__ = [
    "SessionEngine",
    "SessionType",
    "SessionState",
    "TimerSettings",
    "SETTING_RANGES",
    "SETTINGS_KEY",
    "STATE_KEY",
    "AUTO_START_DELAY",
    "Clock",
    "QtClock",
    "Subscription",
]
