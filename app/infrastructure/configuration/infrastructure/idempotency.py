"""Idempotency infrastructure settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class IdempotencySettings(InfrastructureSettings):
    """Idempotency cache configuration for trigger re-delivery.

    The document-change platform delivers events at least once. Results are
    cached per event id so a re-delivered event never increments a badge twice.

    Environment Variables:
        IDEMPOTENCY_TTL_SECONDS: Time-to-live for cache entries (default: 3600s = 1h)
        IDEMPOTENCY_BACKEND: "firestore" (shared across instances) or "memory"
        IDEMPOTENCY_COLLECTION: Firestore collection holding cache entries

    Example:
        ```python
        from infrastructure.services import get_settings

        ttl = get_settings().idempotency.IDEMPOTENCY_TTL_SECONDS
        ```
    """

    IDEMPOTENCY_TTL_SECONDS: int = Field(default=3600, alias="IDEMPOTENCY_TTL_SECONDS")
    IDEMPOTENCY_BACKEND: Literal["firestore", "memory"] = Field(
        default="firestore", alias="IDEMPOTENCY_BACKEND"
    )
    IDEMPOTENCY_COLLECTION: str = Field(
        default="trigger_idempotency", alias="IDEMPOTENCY_COLLECTION"
    )
