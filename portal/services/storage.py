"""Key/value storage port for overlays and the session record.

Values are JSON-encoded strings stored under fixed keys. Every write is
persisted immediately; the last write for a key wins.
"""
from __future__ import annotations

from typing import Protocol

from sqlalchemy.orm import Session

from portal.models.stored_value import StoredValue


class StoragePort(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class SqlStorage:
    """StoragePort over the stored_values table. Commits on every write."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, key: str) -> str | None:
        row = self.db.query(StoredValue).filter(StoredValue.key == key).first()
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        row = self.db.query(StoredValue).filter(StoredValue.key == key).first()
        if row:
            row.value = value
        else:
            self.db.add(StoredValue(key=key, value=value))
        self.db.commit()

    def remove(self, key: str) -> None:
        self.db.query(StoredValue).filter(StoredValue.key == key).delete()
        self.db.commit()


class MemoryStorage:
    """In-process StoragePort; used by tests and scripts."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
