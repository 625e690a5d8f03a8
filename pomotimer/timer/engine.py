"""Pomodoro session engine.

Sessions
--------
WORK          Focus countdown (``work_duration`` minutes).
SHORT_BREAK   Break after a work session (``short_break_duration``).
LONG_BREAK    Every Nth break (``sessions_until_long_break``).

Transitions (on countdown reaching 0, or skip)
----------------------------------------------
WORK → LONG_BREAK          when the new session_count is a multiple of N
WORK → SHORT_BREAK         otherwise
SHORT/LONG_BREAK → WORK    always

Running and paused are flags layered over the current session; there is
no separate idle state.  The cycle never ends.

The engine does not own a timer.  An injected ``Clock`` delivers ticks
while a countdown runs and fires the delayed auto-start.  State is saved
to the ``PersistenceStore`` after every change.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from PyQt6.QtCore import QObject, pyqtSignal

from ..notifications import DesktopNotifier, NotificationLevel, NotificationSink
from ..storage.store import PersistenceStore
from .clock import Clock, Subscription
from .models import SessionState, SessionType, TimerSettings

logger = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

SETTINGS_KEY = "pomodoro_settings"
STATE_KEY = "pomodoro_state"

AUTO_START_DELAY = 3  # seconds between completion and auto-start
SHORT_TOAST_MS = 1500
COMPLETION_TOAST_MS = 5000
DESKTOP_TITLE = "Pomodoro Timer"


def _kind(session_type: SessionType) -> str:
    """Return "Work" or "Break" for completion messages."""
    return "Work" if session_type == SessionType.WORK else "Break"


# ── engine ────────────────────────────────────────────────────────────────


class SessionEngine(QObject):
    """Work/break cycle, countdown and completion policy.

    Signals
    -------
    time_changed(time_left: int)
        After every tick, reset and completion.
    running_changed(is_running: bool)
        On start, pause, reset and completion.
    session_completed(data: dict)
        After completion processing.  Keys: ``finished``, ``next``
        (``SessionType``), ``session_count``, ``total_work_time``,
        ``skipped``.
    """

    time_changed = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        clock: Clock,
        store: PersistenceStore,
        notifier: NotificationSink,
        parent: QObject | None = None,
        *,
        desktop: DesktopNotifier | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self._store = store
        self._notifier = notifier
        self._desktop = desktop

        self._tick_sub: Subscription | None = None
        self._auto_start_sub: Subscription | None = None

        self._settings: TimerSettings = self._load_settings()
        self._state: SessionState = self._load_state()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def settings(self) -> TimerSettings:
        """A copy; use ``update_settings`` to change it."""
        return replace(self._settings)

    @property
    def current_session(self) -> SessionType:
        return self._state.current_session

    @property
    def time_left(self) -> int:
        """Seconds left on the clock."""
        return self._state.time_left

    @property
    def session_count(self) -> int:
        """Completed work sessions."""
        return self._state.session_count

    @property
    def total_work_time(self) -> int:
        """Seconds spent counting down work sessions."""
        return self._state.total_work_time

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def full_duration(self) -> int:
        """Total seconds for the current session type."""
        return self._settings.seconds_for(self._state.current_session)

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the current session."""
        total = self.full_duration
        if total <= 0:
            return 0.0
        elapsed = total - self._state.time_left
        return max(0.0, min(1.0, elapsed / total))

    @property
    def auto_start_pending(self) -> bool:
        return self._auto_start_sub is not None

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        if self._state.is_running:
            return
        self._cancel_auto_start()
        self._state.is_running = True
        self._state.is_paused = False

        sub: Subscription | None = None

        def deliver() -> None:
            # ignore anything from a subscription we already dropped
            if sub is self._tick_sub:
                self.tick()

        sub = self._clock.on_tick(deliver)
        self._tick_sub = sub

        logger.debug("Started %s with %ds left",
                     self._state.current_session.value, self._state.time_left)
        self._notifier.notify("Timer started!", NotificationLevel.SUCCESS, SHORT_TOAST_MS)
        self._save_state()
        self.running_changed.emit(True)

    def pause(self) -> None:
        """Stop the countdown.  A pending auto-start is dropped either way."""
        self._cancel_auto_start()
        if not self._state.is_running:
            return
        self._stop_ticking()
        self._state.is_running = False
        self._state.is_paused = True

        logger.debug("Paused with %ds left", self._state.time_left)
        self._notifier.notify("Timer paused", NotificationLevel.INFO, SHORT_TOAST_MS)
        self._save_state()
        self.running_changed.emit(False)

    def toggle(self) -> None:
        if self._state.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Refill the current session.  Counters are left alone."""
        self._stop_ticking()
        self._cancel_auto_start()
        self._state.is_running = False
        self._state.is_paused = False
        self._state.time_left = self.full_duration

        logger.debug("Reset %s to %ds",
                     self._state.current_session.value, self._state.time_left)
        self._save_state()
        self._notifier.notify("Timer reset", NotificationLevel.INFO, SHORT_TOAST_MS)
        self.running_changed.emit(False)
        self.time_changed.emit(self._state.time_left)

    def skip(self) -> None:
        """Finish the current session now, as if it had run out."""
        self._stop_ticking()
        self._cancel_auto_start()
        self._complete_session(skipped=True)

    def tick(self) -> None:
        """Advance one second.  Ignored unless a countdown is running."""
        if not self._state.is_running:
            return
        self._state.time_left -= 1
        if self._state.current_session == SessionType.WORK:
            self._state.total_work_time += 1
        self._save_state()

        if self._state.time_left <= 0:
            self._complete_session(skipped=False)
        else:
            self.time_changed.emit(self._state.time_left)

    def update_settings(self, settings: TimerSettings) -> None:
        """Validate and apply new settings.

        Raises ``ValueError`` when a duration or the cycle length is out
        of range; the current settings are kept in that case.
        """
        settings.validate()
        self._settings = replace(settings)
        self._store.save(SETTINGS_KEY, self._settings.to_dict())
        logger.info("Settings updated: %s", self._settings)

        if not self._state.is_running:
            self.reset()
        elif self._state.time_left > self.full_duration:
            self._state.time_left = self.full_duration
            self._save_state()
            self.time_changed.emit(self._state.time_left)

        self._notifier.notify("Settings saved!", NotificationLevel.SUCCESS)

    def reset_statistics(self) -> None:
        self._state.session_count = 0
        self._state.total_work_time = 0
        self._save_state()
        self._notifier.notify("Statistics reset", NotificationLevel.INFO)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: completion
    # ══════════════════════════════════════════════════════════════════

    def _complete_session(self, *, skipped: bool) -> None:
        self._stop_ticking()
        self._state.is_running = False
        self._state.is_paused = False

        finished = self._state.current_session
        if finished == SessionType.WORK:
            self._state.session_count += 1
            every = self._settings.sessions_until_long_break
            if self._state.session_count % every == 0:
                upcoming = SessionType.LONG_BREAK
            else:
                upcoming = SessionType.SHORT_BREAK
        else:
            upcoming = SessionType.WORK

        self._state.current_session = upcoming
        self._state.time_left = self._settings.seconds_for(upcoming)

        logger.info(
            "%s session %s; next is %s (%d completed)",
            _kind(finished), "skipped" if skipped else "complete",
            upcoming.display_name, self._state.session_count,
        )

        # ── notifications ─────────────────────────────────────────────
        self._notifier.notify(
            f"{_kind(finished)} session complete! Next: {upcoming.display_name}",
            NotificationLevel.SUCCESS,
            COMPLETION_TOAST_MS,
        )
        if self._settings.show_desktop_notifications:
            self._show_desktop(
                f"{_kind(finished)} session complete!\n"
                f"Next: {upcoming.display_name}"
            )

        # ── auto-start ────────────────────────────────────────────────
        if finished == SessionType.WORK:
            auto = self._settings.auto_start_breaks
        else:
            auto = self._settings.auto_start_work
        if auto:
            self._auto_start_sub = self._clock.after(
                AUTO_START_DELAY, self._on_auto_start,
            )

        self._save_state()

        self.session_completed.emit({
            "finished": finished,
            "next": upcoming,
            "session_count": self._state.session_count,
            "total_work_time": self._state.total_work_time,
            "skipped": skipped,
        })
        self.running_changed.emit(False)
        self.time_changed.emit(self._state.time_left)

    def _on_auto_start(self) -> None:
        self._auto_start_sub = None
        self.start()

    def _show_desktop(self, body: str) -> None:
        if self._desktop is None:
            return
        try:
            self._desktop.show(DESKTOP_TITLE, body)
        except Exception:
            logger.warning("Desktop notification failed", exc_info=True)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: subscriptions
    # ══════════════════════════════════════════════════════════════════

    def _stop_ticking(self) -> None:
        sub, self._tick_sub = self._tick_sub, None
        if sub is not None:
            sub.cancel()

    def _cancel_auto_start(self) -> None:
        sub, self._auto_start_sub = self._auto_start_sub, None
        if sub is not None:
            sub.cancel()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: persistence
    # ══════════════════════════════════════════════════════════════════

    def _save_state(self) -> None:
        self._store.save(STATE_KEY, self._state.to_dict())

    def _load_settings(self) -> TimerSettings:
        data = self._store.load(SETTINGS_KEY)
        if data is None:
            return TimerSettings()
        try:
            settings = TimerSettings.from_dict(data)
            settings.validate()
        except (TypeError, ValueError, AttributeError):
            logger.warning("Stored settings unreadable, using defaults", exc_info=True)
            return TimerSettings()
        return settings

    def _load_state(self) -> SessionState:
        data = self._store.load(STATE_KEY)
        if data is None:
            return SessionState(time_left=self._settings.seconds_for(SessionType.WORK))
        try:
            state = SessionState.from_dict(data)
            state.validate()
        except (TypeError, ValueError):
            logger.warning("Stored timer state unreadable, using defaults", exc_info=True)
            return SessionState(time_left=self._settings.seconds_for(SessionType.WORK))

        # a restarted process never resumes a countdown on its own
        state.is_running = False
        state.is_paused = False

        full = self._settings.seconds_for(state.current_session)
        if not 0 < state.time_left <= full:
            state.time_left = full
        return state
