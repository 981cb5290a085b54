"""Live feed of a user's unread notifications."""

from typing import Callable, List, Optional

from core.logging import get_module_logger
from infrastructure.persistence import DocumentChange, DocumentStore, Unsubscribe

logger = get_module_logger()

USER_NOTIFICATIONS = "user_notifications"


class LiveFeed:
    """Subscription to "unread for user, newest first, at most ``limit``".

    Args:
        store: Document store holding ``user_notifications``
        limit: Size of the feed window
    """

    def __init__(self, store: DocumentStore, limit: int = 5):
        self._store = store
        self._limit = limit
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def start(
        self,
        user_id: str,
        on_change: Callable[[List[DocumentChange]], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        """Subscribe for ``user_id``, replacing any earlier subscription."""
        self.stop()
        self._unsubscribe = self._store.subscribe(
            USER_NOTIFICATIONS,
            filters=[("userId", "==", user_id), ("read", "==", False)],
            on_change=on_change,
            on_error=on_error,
            order_by="createdAt",
            descending=True,
            limit=self._limit,
        )
        logger.info("inbox_feed_started", user_id=user_id, limit=self._limit)

    def stop(self) -> None:
        if self._unsubscribe is None:
            return
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        unsubscribe()
        logger.info("inbox_feed_stopped")
