"""Infrastructure modules for the fan-out service.

Centralized infrastructure components:
- configuration: Settings management (settings)
- logging: structlog setup and invocation context
- auth: Firebase ID token verification (CallerIdentity)
- clients: Firebase Admin SDK app provider
- persistence: Document store interface, Firestore and in-memory backends
- notifications: Token classification, FCM and Expo channels, dispatcher
- events: In-process event dispatcher
- idempotency: Trigger idempotency cache
- operations: Operation results and error classification
- services: Application-scoped providers (get_settings, get_document_store, ...)
"""
