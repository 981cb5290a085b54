"""Badge counters.

Per-event badge increments are staged into one write batch and committed
once. A failed commit is logged and reported as False; dispatch goes on.
"""

from typing import Optional, Set

from core.logging import get_module_logger
from infrastructure.auth import CallerIdentity
from infrastructure.persistence import SERVER_TIMESTAMP, DocumentStore, Increment, WriteBatch
from modules.fanout.domain import InternalError, Unauthenticated

logger = get_module_logger()

USERS = "users"


class BadgeBatch:
    """Badge increments of one event, applied by a single commit."""

    def __init__(self, batch: WriteBatch):
        self._batch = batch
        self._staged: Set[str] = set()
        self._committed = False

    def stage_increment(self, user_id: str) -> None:
        """Stage ``badgeCount += 1``; staging a user twice has no effect."""
        if user_id in self._staged:
            return
        self._staged.add(user_id)
        self._batch.update(
            USERS,
            user_id,
            {"badgeCount": Increment(1), "updatedAt": SERVER_TIMESTAMP},
        )

    @property
    def staged(self) -> Set[str]:
        return set(self._staged)

    def commit(self) -> bool:
        """Apply the staged increments; False when the commit failed."""
        if self._committed:
            raise RuntimeError("Badge batch already committed")
        self._committed = True
        if not self._staged:
            return True
        result = self._batch.commit()
        if not result.is_success:
            logger.error(
                "badge_commit_failed",
                user_count=len(self._staged),
                status=result.status.value,
                error=result.message,
            )
            return False
        logger.info("badge_commit_succeeded", user_count=len(self._staged))
        return True


class BadgeCounterStore:
    """Badge counter operations over the ``users`` collection."""

    def __init__(self, store: DocumentStore, default_badge: int = 1):
        self._store = store
        self._default_badge = default_badge

    def begin(self) -> BadgeBatch:
        return BadgeBatch(self._store.batch())

    def read_badge(self, user_id: str, default: Optional[int] = None) -> int:
        """Badge value to put in a push payload.

        A missing, zero or unreadable counter yields ``default``.
        """
        fallback = self._default_badge if default is None else default
        result = self._store.get(USERS, user_id)
        if not result.is_success:
            logger.warning(
                "badge_read_failed", user_id=user_id, error=result.message
            )
            return fallback
        badge = result.data.get("badgeCount")
        if isinstance(badge, int) and badge > 0:
            return badge
        return fallback

    def reset_badge(self, caller: Optional[CallerIdentity]) -> dict:
        """Set the caller's ``badgeCount`` to 0.

        Raises:
            Unauthenticated: No verified caller identity.
            InternalError: The update could not be written.
        """
        if caller is None or not caller.uid:
            raise Unauthenticated("Badge reset requires an authenticated caller")
        result = self._store.update(
            USERS, caller.uid, {"badgeCount": 0, "updatedAt": SERVER_TIMESTAMP}
        )
        if not result.is_success:
            logger.error(
                "badge_reset_failed",
                user_id=caller.uid,
                status=result.status.value,
                error=result.message,
            )
            raise InternalError(
                "Could not reset the notification counter",
                details=result.message,
            )
        logger.info("badge_reset", user_id=caller.uid)
        return {"success": True}
