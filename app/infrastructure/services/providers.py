"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.auth.identity import FirebaseTokenVerifier
from infrastructure.clients.firebase import FirebaseAppProvider
from infrastructure.configuration import Settings
from infrastructure.idempotency import IdempotencyService
from infrastructure.notifications import ExpoChannel, FcmChannel, PushDispatcher
from infrastructure.persistence import DocumentStore, FirestoreDocumentStore


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    FastAPI routes can take it as a dependency:
        settings: Settings = Depends(get_settings)

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_firebase_provider() -> FirebaseAppProvider:
    """
    Get application-scoped Firebase app provider.

    The firebase_admin App itself is only initialized on first use.

    Returns:
        FirebaseAppProvider: Cached provider configured from settings.firebase.
    """
    return FirebaseAppProvider(get_settings().firebase)


@lru_cache
def get_document_store() -> DocumentStore:
    """
    Get application-scoped Firestore document store.

    Returns:
        DocumentStore: Firestore-backed store bound to the default Firebase app.
    """
    return FirestoreDocumentStore(get_firebase_provider().firestore_client())


@lru_cache
def get_push_dispatcher() -> PushDispatcher:
    """
    Get application-scoped push dispatcher with the FCM and Expo channels.

    Returns:
        PushDispatcher: Dispatcher sending FCM tokens through firebase_admin
        messaging and Expo tokens through the Expo push API.
    """
    settings = get_settings()
    return PushDispatcher(
        channels={
            "fcm": FcmChannel(
                app=get_firebase_provider().app,
                batch_size=settings.fanout.FCM_BATCH_SIZE,
            ),
            "expo": ExpoChannel(settings.expo),
        }
    )


@lru_cache
def get_idempotency_service() -> IdempotencyService:
    """
    Get application-scoped idempotency service.

    Returns:
        IdempotencyService: Backed by the document store or memory, per
        settings.idempotency.IDEMPOTENCY_BACKEND.
    """
    settings = get_settings()
    store = None
    if settings.idempotency.IDEMPOTENCY_BACKEND == "firestore":
        store = get_document_store()
    return IdempotencyService(settings, store=store)


@lru_cache
def get_token_verifier() -> FirebaseTokenVerifier:
    """
    Get application-scoped Firebase ID token verifier.

    Returns:
        FirebaseTokenVerifier: Verifier bound to the default Firebase app.
    """
    return FirebaseTokenVerifier(app=get_firebase_provider().app)
