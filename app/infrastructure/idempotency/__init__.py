"""Infrastructure idempotency cache.

Guards trigger invocations against at-least-once event delivery: the first
result for an event id is cached and returned for every re-delivery.

Usage:

    from infrastructure.idempotency import IdempotencyKeyBuilder, IdempotencyService

    key = IdempotencyKeyBuilder("fanout").build("order.created", event_id=event_id)
    cached = idempotency.get(key)
    if cached is not None:
        return cached
"""

from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.firestore import FirestoreCache
from infrastructure.idempotency.key_builder import IdempotencyKeyBuilder
from infrastructure.idempotency.memory import MemoryCache
from infrastructure.idempotency.service import IdempotencyService

__all__ = [
    "IdempotencyCache",
    "FirestoreCache",
    "IdempotencyKeyBuilder",
    "MemoryCache",
    "IdempotencyService",
]
