"""Idempotency cache abstract base class."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IdempotencyCache(ABC):
    """Abstract base class for idempotency cache implementations.

    Holds the result of an already-processed trigger invocation keyed by the
    platform's event id, so a re-delivered event returns the first result
    instead of incrementing badges and sending pushes a second time.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get the cached result for an idempotency key.

        Returns:
            Cached result dict or None if not found/expired.
        """

    @abstractmethod
    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        """Cache a result for the given idempotency key.

        Args:
            key: Idempotency key.
            response: JSON-serializable result dict.
            ttl_seconds: Time-to-live in seconds; backend default when None.
        """

    @abstractmethod
    def clear(self) -> None:
        """Clear all cached entries (for testing)."""

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics (implementation-specific)."""
