"""Settings and state records for the Pomodoro session engine.

Both records are plain dataclasses that serialise to JSON-compatible
dicts.  ``from_dict`` ignores keys it does not know about so older or
newer stored payloads still load.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from enum import Enum


class SessionType(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[SessionType, str] = {
    SessionType.WORK: "Work Session",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK: "Long Break",
}

# (min, max) inclusive, in minutes except for the cycle length
SETTING_RANGES: dict[str, tuple[int, int]] = {
    "work_duration": (1, 60),
    "short_break_duration": (1, 30),
    "long_break_duration": (1, 60),
    "sessions_until_long_break": (2, 10),
}


def _known_keys(cls) -> set[str]:
    return {f.name for f in fields(cls)}


@dataclass
class TimerSettings:
    """User-editable timer preferences."""

    # ── durations (minutes) ───────────────────────────────────────────
    work_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_until_long_break: int = 4

    # ── behaviour ─────────────────────────────────────────────────────
    auto_start_breaks: bool = False
    auto_start_work: bool = False

    # ── feedback ──────────────────────────────────────────────────────
    show_desktop_notifications: bool = True
    play_notification_sound: bool = True

    def minutes_for(self, session_type: SessionType) -> int:
        if session_type == SessionType.WORK:
            return self.work_duration
        if session_type == SessionType.SHORT_BREAK:
            return self.short_break_duration
        return self.long_break_duration

    def seconds_for(self, session_type: SessionType) -> int:
        return self.minutes_for(session_type) * 60

    def validate(self) -> None:
        """Raise ``ValueError`` listing every field outside its range."""
        problems = []
        for name, (low, high) in SETTING_RANGES.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                problems.append(f"{name} must be an integer, got {value!r}")
            elif not low <= value <= high:
                problems.append(f"{name} must be between {low} and {high}, got {value}")
        if problems:
            raise ValueError("; ".join(problems))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> TimerSettings:
        valid_keys = _known_keys(cls)
        return cls(**{k: v for k, v in data.items() if k in valid_keys})


@dataclass
class SessionState:
    """Mutable countdown state, persisted after every change."""

    is_running: bool = False
    is_paused: bool = False
    current_session: SessionType = SessionType.WORK
    time_left: int = 25 * 60  # seconds
    session_count: int = 0
    total_work_time: int = 0  # seconds

    def to_dict(self) -> dict:
        data = asdict(self)
        data["current_session"] = self.current_session.value
        return data

    def validate(self) -> None:
        """Raise ``ValueError`` if a counter is not a non-negative integer."""
        problems = []
        for name in ("time_left", "session_count", "total_work_time"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                problems.append(f"{name} must be an integer, got {value!r}")
            elif value < 0:
                problems.append(f"{name} must not be negative, got {value}")
        if problems:
            raise ValueError("; ".join(problems))

    @classmethod
    def from_dict(cls, data: dict) -> SessionState:
        """Build a state from a stored payload.

        Raises ``ValueError`` for an unknown session type and
        ``TypeError`` for a payload that is not a mapping.
        """
        valid_keys = _known_keys(cls)
        filtered = {k: v for k, v in dict(data).items() if k in valid_keys}
        if "current_session" in filtered:
            filtered["current_session"] = SessionType(filtered["current_session"])
        return cls(**filtered)
