"""Persisted set of notification ids already shown in-app.

Append-only. Backed by a small key-value store so the set survives
restarts of the client; the JSON file store is the on-device default.
"""

import json
import os
import threading
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from core.logging import get_module_logger

logger = get_module_logger()

VIEWED_KEY = "viewed_notifications"


class KeyValueStore(ABC):
    """Minimal on-device storage: JSON-serializable values by key."""

    @abstractmethod
    def load(self, key: str) -> Optional[List[str]]:
        """Stored list for ``key`` or None."""

    @abstractmethod
    def save(self, key: str, value: List[str]) -> None:
        """Replace the stored list for ``key``."""


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self):
        self._data = {}

    def load(self, key: str) -> Optional[List[str]]:
        value = self._data.get(key)
        return list(value) if value is not None else None

    def save(self, key: str, value: List[str]) -> None:
        self._data[key] = list(value)


class JsonFileStore(KeyValueStore):
    """Key-value store kept in one JSON file, written atomically."""

    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()

    def _read_all(self) -> dict:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("viewed_store_unreadable", path=self._path, error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, key: str) -> Optional[List[str]]:
        with self._lock:
            value = self._read_all().get(key)
        return list(value) if isinstance(value, list) else None

    def save(self, key: str, value: List[str]) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = list(value)
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = f"{self._path}.tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self._path)


class ViewedSet:
    """Ids of records already displayed, loaded once and saved on change."""

    def __init__(self, store: KeyValueStore, key: str = VIEWED_KEY):
        self._store = store
        self._key = key
        self._ids: List[str] = []
        self._index: Set[str] = set()
        self.load()

    def load(self) -> None:
        try:
            stored = self._store.load(self._key) or []
        except Exception as e:
            logger.warning("viewed_set_load_failed", error=str(e))
            stored = []
        self._ids = []
        self._index = set()
        for notification_id in stored:
            if notification_id not in self._index:
                self._index.add(notification_id)
                self._ids.append(notification_id)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._index

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, notification_id: str) -> bool:
        """Mark one id viewed; False if it already was."""
        return self.add_many([notification_id]) == 1

    def add_many(self, notification_ids: Iterable[str]) -> int:
        """Mark ids viewed and persist once; returns how many were new."""
        added = 0
        for notification_id in notification_ids:
            if notification_id and notification_id not in self._index:
                self._index.add(notification_id)
                self._ids.append(notification_id)
                added += 1
        if added:
            self._persist()
        return added

    def ids(self) -> List[str]:
        return list(self._ids)

    def _persist(self) -> None:
        try:
            self._store.save(self._key, self._ids)
        except Exception as e:
            logger.error("viewed_set_save_failed", error=str(e), count=len(self._ids))
