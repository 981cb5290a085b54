"""Unit tests for the in-process idempotency cache."""

import pytest

from infrastructure.idempotency import MemoryCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.mark.unit
class TestMemoryCache:
    """Tests for MemoryCache."""

    def test_set_and_get(self):
        """Cached responses are returned until they expire."""
        clock = FakeClock()
        cache = MemoryCache(ttl_seconds=10, clock=clock)
        cache.set("k", {"outcome": None})

        assert cache.get("k") == {"outcome": None}
        clock.now = 10
        assert cache.get("k") is None

    def test_per_entry_ttl(self):
        """An explicit TTL overrides the default."""
        clock = FakeClock()
        cache = MemoryCache(ttl_seconds=10, clock=clock)
        cache.set("k", {"a": 1}, ttl_seconds=100)
        clock.now = 50

        assert cache.get("k") == {"a": 1}

    def test_stats_and_clear(self):
        """Hits and misses are counted; clear empties the cache."""
        cache = MemoryCache()
        cache.set("k", {"a": 1})
        cache.get("k")
        cache.get("missing")

        stats = cache.get_stats()
        assert (stats["hits"], stats["misses"], stats["entries"]) == (1, 1, 1)

        cache.clear()
        assert cache.get("k") is None
