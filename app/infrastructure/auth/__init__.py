"""Infrastructure auth module - caller identity.

Exports:
    CallerIdentity: Verified caller (uid, email, claims)
    FirebaseTokenVerifier: Firebase ID token verification

The FastAPI dependency lives in ``infrastructure.auth.security``.
"""

from infrastructure.auth.identity import CallerIdentity, FirebaseTokenVerifier

__all__ = [
    "CallerIdentity",
    "FirebaseTokenVerifier",
]
