"""Key/value persistence for engine settings and state.

Values are JSON-compatible (dicts of str/int/bool).  Every store copies
on the way in and out, so a caller mutating a loaded dict never changes
what is stored.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from .db import get_session
from .models import StoredValue


class PersistenceStore(Protocol):
    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """In-process store; used by tests and headless runs."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlStore:
    """Store backed by the ``stored_values`` table.

    Call ``init_db()`` before the first ``load``/``save``.
    """

    def load(self, key: str) -> Any | None:
        with get_session() as db:
            row = db.get(StoredValue, key)
            if row is None:
                return None
            return json.loads(row.value)

    def save(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with get_session() as db:
            row = db.get(StoredValue, key)
            if row is None:
                db.add(StoredValue(key=key, value=encoded))
            else:
                row.value = encoded
