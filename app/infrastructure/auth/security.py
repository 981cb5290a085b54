"""Bearer-token security dependency for the API.

Resolves the ``Authorization: Bearer <Firebase ID token>`` header into a
CallerIdentity. A missing or invalid token yields None; the operation
decides whether anonymous callers are acceptable.
"""

from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.auth.identity import CallerIdentity, FirebaseTokenVerifier
from infrastructure.services.providers import get_token_verifier

security = HTTPBearer(auto_error=False)


def get_caller_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> Optional[CallerIdentity]:
    """FastAPI dependency returning the verified caller, or None."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    result = verifier.verify(credentials.credentials)
    if not result.is_success:
        return None
    return result.data
