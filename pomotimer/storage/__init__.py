"""Storage package."""

from .db import configure_engine, dispose_engine, get_engine, get_session, init_db
from .models import StoredValue
from .store import PersistenceStore, MemoryStore, SqlStore

__all__ = [
    "configure_engine",
    "dispose_engine",
    "get_engine",
    "get_session",
    "init_db",
    "StoredValue",
    "PersistenceStore",
    "MemoryStore",
    "SqlStore",
]
