"""Firebase Admin SDK client access.

    from infrastructure.clients.firebase import FirebaseAppProvider

    provider = FirebaseAppProvider(settings.firebase)
    db = provider.firestore_client()
"""

from infrastructure.clients.firebase.app_provider import FirebaseAppProvider

__all__ = ["FirebaseAppProvider"]
