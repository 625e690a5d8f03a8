"""Notification sinks used by the session engine.

Two channels:

- a ``NotificationSink`` receives short in-app status messages
  ("Timer started!", "Work session complete! ...").  Fire-and-forget.
- an optional ``DesktopNotifier`` pops an OS-level notification.  It may
  fail (no tray, permission denied); the engine catches and logs that.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QSystemTrayIcon

logger = logging.getLogger(__name__)


class NotificationLevel(Enum):
    SUCCESS = "success"
    INFO = "info"


class NotificationSink(Protocol):
    def notify(
        self,
        message: str,
        level: NotificationLevel,
        duration_ms: int | None = None,
    ) -> None: ...


class DesktopNotifier(Protocol):
    def show(self, title: str, body: str) -> None: ...


# ── sinks ─────────────────────────────────────────────────────────────────


class LogNotificationSink:
    """Write status messages to a logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def notify(self, message, level, duration_ms=None) -> None:
        self._log.info("[%s] %s", level.value, message)


class SignalNotificationSink(QObject):
    """Re-emit status messages as a Qt signal for display code.

    Signals
    -------
    message(text: str, level: NotificationLevel, duration_ms: int)
        ``duration_ms`` is 0 when the caller gave none.
    """

    message = pyqtSignal(str, object, int)

    def notify(self, message, level, duration_ms=None) -> None:
        self.message.emit(message, level, duration_ms or 0)


# ── desktop ───────────────────────────────────────────────────────────────


class TrayNotifier:
    """Desktop notifications through the system tray icon.

    Usage::

        notifier = TrayNotifier(tray_icon)
        notifier.show("Pomodoro Timer", "Work session complete!")
    """

    def __init__(self, tray_icon: QSystemTrayIcon, *, enabled: bool = True) -> None:
        self._tray_icon = tray_icon
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def show(self, title: str, body: str) -> None:
        if not self._enabled:
            return
        if not QSystemTrayIcon.supportsMessages():
            raise RuntimeError("system tray does not support messages")
        self._tray_icon.showMessage(title, body)
