"""Idempotency service for dependency injection."""

from typing import Any, Dict, Optional, TYPE_CHECKING

from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.firestore import FirestoreCache
from infrastructure.idempotency.memory import MemoryCache

if TYPE_CHECKING:
    from infrastructure.configuration import Settings
    from infrastructure.persistence.store import DocumentStore


class IdempotencyService:
    """Class-based idempotency service.

    Wraps an IdempotencyCache so triggers receive it through the fan-out
    context and tests can pass a MemoryCache or a mock.

    Usage:
        service = IdempotencyService(settings, store=store)

        cached = service.get(key)
        if cached is not None:
            return cached
        result = run_trigger()
        service.set(key, result)
    """

    def __init__(
        self,
        settings: "Settings",
        store: Optional["DocumentStore"] = None,
        cache: Optional[IdempotencyCache] = None,
    ):
        """Initialize idempotency service.

        Args:
            settings: Settings instance.
            store: Document store used by the firestore backend.
            cache: Optional pre-configured cache; overrides the configured backend.
        """
        self._ttl_seconds = settings.idempotency.IDEMPOTENCY_TTL_SECONDS
        if cache is None:
            if settings.idempotency.IDEMPOTENCY_BACKEND == "firestore" and store is not None:
                cache = FirestoreCache(
                    store,
                    collection=settings.idempotency.IDEMPOTENCY_COLLECTION,
                    ttl_seconds=self._ttl_seconds,
                )
            else:
                cache = MemoryCache(ttl_seconds=self._ttl_seconds)
        self._cache = cache

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Cached result for ``key`` or None."""
        return self._cache.get(key)

    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        """Cache ``response`` under ``key`` (configured TTL by default)."""
        self._cache.set(
            key, response, self._ttl_seconds if ttl_seconds is None else ttl_seconds
        )

    def clear(self) -> None:
        """Clear all cached entries. Primarily intended for testing."""
        self._cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Cache statistics (implementation-specific)."""
        return self._cache.get_stats()

    @property
    def cache(self) -> IdempotencyCache:
        """Underlying IdempotencyCache instance."""
        return self._cache
