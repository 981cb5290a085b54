"""Caller identity verification.

Verifies Firebase ID tokens presented by the mobile client and turns them
into a CallerIdentity.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from firebase_admin import auth as firebase_auth

from core.logging import get_module_logger
from infrastructure.operations import OperationResult, OperationStatus

logger = get_module_logger()


@dataclass(frozen=True)
class CallerIdentity:
    """Verified identity of the user calling the API."""

    uid: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, compare=False)


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens with firebase_admin.auth.

    Args:
        app: firebase_admin App (default app when None)
        check_revoked: Also reject revoked sessions (one extra lookup)
    """

    def __init__(self, app=None, check_revoked: bool = False) -> None:
        self._app = app
        self._check_revoked = check_revoked

    def verify(self, id_token: str) -> OperationResult:
        """Verify ``id_token``.

        Returns:
            success(data=CallerIdentity) or an UNAUTHORIZED result
        """
        if not id_token:
            return OperationResult.error(
                OperationStatus.UNAUTHORIZED, "Missing ID token", error_code="NO_TOKEN"
            )
        try:
            claims = firebase_auth.verify_id_token(
                id_token, app=self._app, check_revoked=self._check_revoked
            )
        except (ValueError, firebase_auth.InvalidIdTokenError) as e:
            logger.warning("id_token_rejected", error=str(e))
            return OperationResult.error(
                OperationStatus.UNAUTHORIZED,
                f"Invalid ID token: {e}",
                error_code="INVALID_TOKEN",
            )
        except firebase_auth.CertificateFetchError as e:
            logger.error("id_token_certificates_unavailable", error=str(e))
            return OperationResult.transient_error(
                "Could not fetch token signing certificates",
                error_code="CERTIFICATE_FETCH_ERROR",
            )
        return OperationResult.success(
            data=CallerIdentity(
                uid=claims["uid"], email=claims.get("email"), claims=claims
            )
        )
