"""User token profiles.

Reads the push-relevant slice of ``users/{id}`` and maintains the
``notificationToken`` / ``devices[]`` fields when a device registers or
unregisters its push token.
"""

from datetime import datetime, timezone
from typing import Optional

from core.logging import get_module_logger
from infrastructure.operations import OperationResult, OperationStatus
from infrastructure.persistence import SERVER_TIMESTAMP, DocumentStore
from modules.fanout.domain import UserTokenProfile

logger = get_module_logger()

USERS = "users"


class ProfileRepository:
    """Token profile access over the document store.

    Args:
        store: Document store holding the ``users`` collection
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    def fetch(self, user_id: str) -> Optional[UserTokenProfile]:
        """Profile of ``user_id``; None when missing or unreadable (logged)."""
        result = self._store.get(USERS, user_id)
        if result.status == OperationStatus.NOT_FOUND:
            logger.info("recipient_profile_missing", user_id=user_id)
            return None
        if not result.is_success:
            logger.warning(
                "recipient_profile_fetch_failed",
                user_id=user_id,
                status=result.status.value,
                error=result.message,
            )
            return None
        return UserTokenProfile.from_document(user_id, result.data or {})

    def register_device_token(
        self, user_id: str, token: str, platform: Optional[str] = None
    ) -> OperationResult:
        """Make ``token`` the primary token and list it once in ``devices``.

        Creates the user document when it does not exist yet. Registering a
        known token refreshes its device entry instead of adding another.
        """
        if not user_id or not token:
            return OperationResult.permanent_error(
                "user_id and token are required", error_code="INVALID_PARAMS"
            )
        device = {"token": token, "updatedAt": datetime.now(timezone.utc)}
        if platform:
            device["platform"] = platform

        current = self._store.get(USERS, user_id)
        if current.status == OperationStatus.NOT_FOUND:
            result = self._store.set(
                USERS,
                user_id,
                {
                    "notificationToken": token,
                    "devices": [device],
                    "createdAt": SERVER_TIMESTAMP,
                    "updatedAt": SERVER_TIMESTAMP,
                },
            )
        elif not current.is_success:
            return current
        else:
            devices = [
                d
                for d in (current.data.get("devices") or [])
                if not (isinstance(d, dict) and d.get("token") == token)
            ]
            devices.append(device)
            result = self._store.update(
                USERS,
                user_id,
                {
                    "notificationToken": token,
                    "devices": devices,
                    "updatedAt": SERVER_TIMESTAMP,
                },
            )
        if result.is_success:
            logger.info("device_token_registered", user_id=user_id, platform=platform)
        else:
            logger.warning(
                "device_token_register_failed", user_id=user_id, error=result.message
            )
        return result

    def remove_device_token(self, user_id: str, token: str) -> OperationResult:
        """Drop ``token`` from ``devices`` and clear it as primary token."""
        if not user_id or not token:
            return OperationResult.permanent_error(
                "user_id and token are required", error_code="INVALID_PARAMS"
            )
        current = self._store.get(USERS, user_id)
        if not current.is_success:
            return current
        devices = [
            d
            for d in (current.data.get("devices") or [])
            if not (isinstance(d, dict) and d.get("token") == token)
        ]
        update = {"devices": devices, "updatedAt": SERVER_TIMESTAMP}
        if current.data.get("notificationToken") == token:
            update["notificationToken"] = None
        result = self._store.update(USERS, user_id, update)
        if result.is_success:
            logger.info("device_token_removed", user_id=user_id)
        return result
