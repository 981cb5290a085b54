"""
Dependency injection services.

Application-scoped providers for the settings, Firestore store, push
dispatcher, idempotency cache and token verifier.
"""

from infrastructure.services.providers import (
    get_document_store,
    get_firebase_provider,
    get_idempotency_service,
    get_push_dispatcher,
    get_settings,
    get_token_verifier,
)

__all__ = [
    "get_settings",
    "get_firebase_provider",
    "get_document_store",
    "get_push_dispatcher",
    "get_idempotency_service",
    "get_token_verifier",
]
