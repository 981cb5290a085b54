"""Idempotency key builder for consistent key generation."""

import hashlib
from typing import Any


class IdempotencyKeyBuilder:
    """Build deterministic idempotency keys.

    Keys are safe as document ids: no slashes, bounded length.

    Example:
        >>> builder = IdempotencyKeyBuilder(namespace="fanout")
        >>> builder.build(operation="order.created", event_id="evt-123")
        'fanout:order.created:1f0c6e0b5a2d4c77'
    """

    def __init__(self, namespace: str):
        self.namespace = namespace

    def build(self, operation: str, **components: Any) -> str:
        """Build an idempotency key.

        Args:
            operation: Operation type (e.g., the event type)
            **components: Key components (event_id, group, ...)

        Returns:
            ``"<namespace>:<operation>:<sha256 prefix>"``
        """
        key_parts = [self.namespace, operation]
        key_parts.extend(f"{k}={v}" for k, v in sorted(components.items()))
        key_string = "|".join(str(part) for part in key_parts)

        key_hash = hashlib.sha256(key_string.encode()).hexdigest()[:16]
        return f"{self.namespace}:{operation}:{key_hash}"
