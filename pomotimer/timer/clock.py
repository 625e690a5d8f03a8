"""Time sources for the session engine.

The engine never owns a timer.  It asks a ``Clock`` for two things:

``on_tick(callback)``
    call *callback* roughly once per second until cancelled.
``after(seconds, callback)``
    call *callback* once, *seconds* from now, unless cancelled.

Both return a ``Subscription``.  Once ``cancel()`` returns, the callback
is never invoked again, even if the underlying timer already queued an
event.
"""

from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer


TICK_INTERVAL_MS = 1000


class Subscription(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Clock(Protocol):
    def on_tick(self, callback: Callable[[], None]) -> Subscription: ...

    def after(self, seconds: float, callback: Callable[[], None]) -> Subscription: ...


# ── Qt implementation ─────────────────────────────────────────────────────


class QtSubscription:
    """Owns one ``QTimer`` and guards its callback with an active flag."""

    def __init__(self, timer: QTimer, callback: Callable[[], None]) -> None:
        self._timer = timer
        self._callback = callback
        self._active = True
        timer.timeout.connect(self._fire)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def timer(self) -> QTimer:
        return self._timer

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._timer.stop()
        self._timer.timeout.disconnect(self._fire)
        self._timer.deleteLater()

    def _fire(self) -> None:
        if not self._active:
            return
        if self._timer.isSingleShot():
            # one-shot: spent after the first delivery
            self.cancel()
        self._callback()


class QtClock(QObject):
    """Clock backed by the Qt event loop."""

    def __init__(self, parent: QObject | None = None, *,
                 interval_ms: int = TICK_INTERVAL_MS) -> None:
        super().__init__(parent)
        self._interval_ms = interval_ms

    def on_tick(self, callback: Callable[[], None]) -> QtSubscription:
        timer = QTimer(self)
        timer.setInterval(self._interval_ms)
        sub = QtSubscription(timer, callback)
        timer.start()
        return sub

    def after(self, seconds: float, callback: Callable[[], None]) -> QtSubscription:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(int(seconds * 1000))
        sub = QtSubscription(timer, callback)
        timer.start()
        return sub
