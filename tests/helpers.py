"""Shared test helpers for PomoTimer."""

from __future__ import annotations

from pomotimer.notifications import NotificationLevel
from pomotimer.timer.engine import SessionEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


# ── fake clock ────────────────────────────────────────────────────────────


class FakeSubscription:
    def __init__(self, clock: "FakeClock", callback, due: int | None = None):
        self._clock = clock
        self.callback = callback
        self.due = due
        self.active = True

    def cancel(self) -> None:
        self.active = False


class FakeClock:
    """Deterministic clock: time only moves when ``advance`` is called.

    Each simulated second first delivers a tick to every active tick
    subscription, then fires one-shots that have come due.  A tick
    subscription made at time *t* first fires at *t + 1*.
    """

    def __init__(self):
        self.now = 0
        self._tickers: list[FakeSubscription] = []
        self._timers: list[FakeSubscription] = []

    def on_tick(self, callback) -> FakeSubscription:
        sub = FakeSubscription(self, callback)
        self._tickers.append(sub)
        return sub

    def after(self, seconds, callback) -> FakeSubscription:
        sub = FakeSubscription(self, callback, due=self.now + int(seconds))
        self._timers.append(sub)
        return sub

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            self.now += 1
            for sub in list(self._tickers):
                if sub.active:
                    sub.callback()
            for sub in list(self._timers):
                if sub.active and sub.due <= self.now:
                    sub.active = False
                    sub.callback()
            self._tickers = [s for s in self._tickers if s.active]
            self._timers = [s for s in self._timers if s.active]

    @property
    def active_tickers(self) -> int:
        return sum(1 for s in self._tickers if s.active)

    @property
    def pending_timers(self) -> int:
        return sum(1 for s in self._timers if s.active)


# ── notification sinks ────────────────────────────────────────────────────


class RecordingSink:
    """NotificationSink that remembers every message."""

    def __init__(self):
        self.messages: list[tuple[str, NotificationLevel, int | None]] = []

    def notify(self, message, level, duration_ms=None):
        self.messages.append((message, level, duration_ms))

    @property
    def texts(self) -> list[str]:
        return [m[0] for m in self.messages]

    @property
    def last(self):
        return self.messages[-1] if self.messages else None

    def clear(self):
        self.messages.clear()


class RecordingDesktop:
    def __init__(self):
        self.shown: list[tuple[str, str]] = []

    def show(self, title, body):
        self.shown.append((title, body))


class FailingDesktop:
    """Desktop notifier that always fails, like a denied permission."""

    def __init__(self):
        self.calls = 0

    def show(self, title, body):
        self.calls += 1
        raise PermissionError("notifications not allowed")


def complete_session(engine: SessionEngine, clock: FakeClock) -> None:
    """Run the current session to zero through the clock."""
    if not engine.is_running:
        engine.start()
    clock.advance(engine.time_left)
