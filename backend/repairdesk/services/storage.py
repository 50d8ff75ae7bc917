"""Key-value backends holding the serialized repair data record.

The store only needs ``get``/``set`` of one text value under a fixed key, the
same contract browser local storage offers. ``SqlBlobStorage`` keeps the value
in the ``kv_entries`` table; ``MemoryBlobStorage`` is a dict for tests and
scripts.
"""
from __future__ import annotations
from typing import Callable, Dict, Optional, Protocol
from sqlalchemy import select
from sqlalchemy.orm import Session
from repairdesk.models.kv_entry import KvEntry


class BlobStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryBlobStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes += 1


class SqlBlobStorage:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        session = self._session_factory()
        entry = session.execute(select(KvEntry).where(KvEntry.key == key)).scalar_one_or_none()
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        session = self._session_factory()
        entry = session.execute(select(KvEntry).where(KvEntry.key == key)).scalar_one_or_none()
        if entry is None:
            session.add(KvEntry(key=key, value=value))
        else:
            entry.value = value
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise


__all__ = ['BlobStorage', 'MemoryBlobStorage', 'SqlBlobStorage']
