"""SQLite engine and session handling for the key/value store.

One engine per process, built on first use from ``DEFAULT_URL`` unless
``configure_engine`` picked another URL first.  ``dispose_engine`` drops
it again so the next use reconnects.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoTimer"
DB_PATH = APP_SUPPORT_DIR / "pomotimer.db"
DEFAULT_URL = f"sqlite:///{DB_PATH}"

_engine: Engine | None = None
_sessions: sessionmaker[Session] | None = None


def _is_memory(url: str) -> bool:
    return make_url(url).database in (None, "", ":memory:")


def _build_engine(url: str) -> Engine:
    options: dict = {"connect_args": {"check_same_thread": False}}
    if _is_memory(url):
        # every connection to :memory: is a new empty database
        options["poolclass"] = StaticPool
    else:
        Path(make_url(url).database).parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Opening database %s", url)
    return create_engine(url, **options)


def configure_engine(url: str = DEFAULT_URL) -> Engine:
    """Replace the process engine.  Tests pass ``sqlite:///:memory:``."""
    global _engine, _sessions
    dispose_engine()
    _engine = _build_engine(url)
    _sessions = sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _sessions
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _sessions = None


def get_engine() -> Engine:
    if _engine is None:
        return configure_engine()
    return _engine


def init_db() -> None:
    """Create the ``stored_values`` table if it is missing."""
    Base.metadata.create_all(get_engine())


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session; commit on success, roll back on error."""
    get_engine()
    session = _sessions()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
