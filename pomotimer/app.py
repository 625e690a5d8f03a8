"""Tray plugin: wires the session engine to Qt, storage, sounds and the tray."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from .audio.sounds import SoundManager
from .notifications import (
    LogNotificationSink, NotificationLevel, NotificationSink, TrayNotifier,
)
from .settings import AppSettings, load_settings
from .storage.store import PersistenceStore, SqlStore
from .timer.clock import Clock, QtClock
from .timer.engine import SessionEngine

logger = logging.getLogger(__name__)

APP_NAME = "Pomodoro Timer"


# ── formatting helpers ───────────────────────────────────────────────────


def format_time(seconds: int) -> str:
    """``MM:SS``, both fields zero-padded."""
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


def session_label(engine: SessionEngine) -> str:
    """One-line summary, e.g. ``Session 3 • Total: 50min``."""
    return (
        f"Session {engine.session_count + 1} • "
        f"Total: {engine.total_work_time // 60}min"
    )


def status_text(engine: SessionEngine) -> str:
    """Tray tooltip, e.g. ``Work Session • 24:59``."""
    text = f"{engine.current_session.display_name} • {format_time(engine.time_left)}"
    if engine.is_paused:
        text += " (paused)"
    return text


class PomodoroPlugin(QObject):
    """Owns one ``SessionEngine`` plus the shell around it.

    Every collaborator can be injected; the defaults are the real Qt
    clock, the SQLite store and a logging notification sink.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        store: PersistenceStore | None = None,
        notifier: NotificationSink | None = None,
        app_settings: AppSettings | None = None,
        tray_icon: QSystemTrayIcon | None = None,
        sound_manager: SoundManager | None = None,
    ) -> None:
        super().__init__(parent)
        self._app_settings = app_settings or load_settings()
        self._notifier = notifier or LogNotificationSink()
        self._tray_icon = tray_icon
        self._sounds = sound_manager
        if self._sounds is not None:
            self._sounds.set_volume(self._app_settings.sound_volume)

        desktop = None
        if tray_icon is not None:
            desktop = TrayNotifier(
                tray_icon, enabled=self._app_settings.tray_notifications,
            )

        self._engine = SessionEngine(
            clock or QtClock(self),
            store or SqlStore(),
            self._notifier,
            self,
            desktop=desktop,
        )

        self._menu: QMenu | None = None
        self._toggle_action: QAction | None = None

        # ── wire signals ──────────────────────────────────────────────
        self._engine.running_changed.connect(self._on_running_changed)
        self._engine.session_completed.connect(self._on_session_completed)
        self._engine.time_changed.connect(self._on_time_changed)

        self._refresh_tooltip()
        self._notifier.notify(f"{APP_NAME} ready!", NotificationLevel.SUCCESS)

    # ── public ────────────────────────────────────────────────────────

    @property
    def engine(self) -> SessionEngine:
        return self._engine

    def build_menu(self) -> QMenu:
        """Context menu for the tray icon."""
        menu = QMenu()

        self._toggle_action = menu.addAction("Start")
        self._toggle_action.triggered.connect(self._engine.toggle)

        reset_action = menu.addAction("Reset")
        reset_action.triggered.connect(self._engine.reset)

        skip_action = menu.addAction("Skip")
        skip_action.triggered.connect(self._engine.skip)

        menu.addSeparator()

        stats_action = menu.addAction("Reset Statistics")
        stats_action.triggered.connect(self._engine.reset_statistics)

        menu.addSeparator()

        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self._quit)

        self._menu = menu
        self._refresh_toggle_label()
        return menu

    # ── engine signals ────────────────────────────────────────────────

    def _on_running_changed(self, running: bool) -> None:
        self._refresh_toggle_label()
        self._refresh_tooltip()
        if running:
            self._play("timer_start")

    def _on_session_completed(self, data: dict) -> None:
        logger.info(
            "Finished %s, %s",
            data["finished"].display_name, session_label(self._engine),
        )
        self._play("session_complete")

    def _on_time_changed(self, _time_left: int) -> None:
        self._refresh_tooltip()

    # ── helpers ───────────────────────────────────────────────────────

    def _play(self, name: str) -> None:
        if self._sounds is None:
            return
        if not self._engine.settings.play_notification_sound:
            return
        self._sounds.play(name)

    def _refresh_toggle_label(self) -> None:
        if self._toggle_action is None:
            return
        if self._engine.is_running:
            self._toggle_action.setText("Pause")
        elif self._engine.is_paused:
            self._toggle_action.setText("Resume")
        else:
            self._toggle_action.setText("Start")

    def _refresh_tooltip(self) -> None:
        if self._tray_icon is not None:
            self._tray_icon.setToolTip(f"{APP_NAME} \u2014 {status_text(self._engine)}")

    def _quit(self) -> None:
        if self._engine.is_running:
            self._engine.pause()
        if self._tray_icon is not None:
            self._tray_icon.hide()
        QApplication.instance().quit()
