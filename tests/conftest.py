"""Shared pytest fixtures for PomoTimer tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from pomotimer.storage.db import configure_engine, dispose_engine, init_db
from pomotimer.storage.store import MemoryStore
from pomotimer.timer.engine import SessionEngine, SETTINGS_KEY
from pomotimer.timer.models import TimerSettings

from helpers import FakeClock, RecordingSink, RecordingDesktop


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield
    dispose_engine()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def desktop():
    return RecordingDesktop()


@pytest.fixture
def make_engine(clock, store, sink, desktop):
    """Factory: build an engine over the shared fakes, optionally with
    pre-stored settings."""

    def _make(settings: TimerSettings | None = None, **kwargs) -> SessionEngine:
        if settings is not None:
            store.save(SETTINGS_KEY, settings.to_dict())
        kwargs.setdefault("desktop", desktop)
        return SessionEngine(clock, store, sink, None, **kwargs)

    return _make


@pytest.fixture
def engine(make_engine):
    """Fresh engine with default settings (25/5/15, long break every 4)."""
    return make_engine()


@pytest.fixture
def fast_engine(make_engine):
    """One-minute sessions so full cycles stay quick."""
    return make_engine(TimerSettings(
        work_duration=1, short_break_duration=1, long_break_duration=2,
    ))
