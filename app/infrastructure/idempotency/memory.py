"""In-process idempotency cache."""

import time
from threading import Lock
from typing import Any, Dict, Optional, Tuple

from core.logging import get_module_logger
from infrastructure.idempotency.cache import IdempotencyCache

logger = get_module_logger()


class MemoryCache(IdempotencyCache):
    """Dict-backed cache with lazy expiry.

    Only suitable for a single process: local development and tests.
    """

    def __init__(self, ttl_seconds: int = 3600, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry[0] <= self._clock():
                self._entries.pop(key, None)
                self._misses += 1
                return None
            self._hits += 1
            return entry[1]

    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._entries[key] = (self._clock() + ttl, response)
        logger.debug("idempotency_cache_set", key=key, ttl_seconds=ttl)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "ttl_seconds": self.ttl_seconds,
            }
