"""Client notification queue.

Turns the live feed of unread notifications into in-app banners shown one
at a time:

- a newly added record is queued only while the app is foregrounded, the
  notifications screen is closed, the launch cooldown has passed and the id
  has never been shown (ViewedSet) nor is already queued or on screen
- banners display in arrival order through a single display slot
- dismissing a banner (close, timeout, tap) records its id as viewed and
  lets the next one in
- opening the notifications screen blocks new displays; the banner already
  on screen stays until dismissed

All methods must be called on the scheduler's thread.
"""

from collections import deque
from typing import Callable, Deque, List, Literal, Optional

from pydantic import ValidationError

from core.logging import get_module_logger
from infrastructure.configuration.features import InboxFeatureSettings
from infrastructure.persistence import DocumentChange, DocumentStore
from modules.inbox.feed import USER_NOTIFICATIONS, LiveFeed
from modules.inbox.models import BannerPayload, BannerRoute, NotificationRecord
from modules.inbox.scheduler import Scheduler, TimerHandle
from modules.inbox.viewed import ViewedSet

logger = get_module_logger()

# Firestore rejects write batches above this size.
MAX_BATCH_WRITES = 500

DismissReason = Literal["close", "timeout", "tap", "cleared"]
AppState = Literal["active", "background", "inactive"]


class NotificationQueue:
    """FIFO banner queue with a single display slot.

    Args:
        store: Document store holding ``user_notifications``
        viewed: Persisted set of already shown ids
        scheduler: Cooperative scheduler for timers and feed callbacks
        settings: Feed window, cooldown and auto-dismiss delay
        on_display: Called with each banner when it takes the display slot
        on_hide: Called with the banner and reason when it leaves the slot
    """

    def __init__(
        self,
        store: DocumentStore,
        viewed: ViewedSet,
        scheduler: Scheduler,
        settings: InboxFeatureSettings,
        on_display: Callable[[BannerPayload], None],
        on_hide: Optional[Callable[[BannerPayload, str], None]] = None,
    ):
        self._store = store
        self._viewed = viewed
        self._scheduler = scheduler
        self._settings = settings
        self._on_display = on_display
        self._on_hide = on_hide
        self._feed = LiveFeed(store, limit=settings.INBOX_FEED_LIMIT)

        self._user_id: Optional[str] = None
        self._started_at_ms = 0.0
        self._generation = 0
        self._pending: Deque[BannerPayload] = deque()
        self._current: Optional[BannerPayload] = None
        self._timer: Optional[TimerHandle] = None
        self._app_state: AppState = "active"
        self._screen_active = False

    # Introspection

    @property
    def current(self) -> Optional[BannerPayload]:
        return self._current

    @property
    def pending(self) -> List[BannerPayload]:
        return list(self._pending)

    @property
    def running(self) -> bool:
        return self._user_id is not None

    # Session lifecycle

    def start(self, user_id: str) -> None:
        """Subscribe to ``user_id``'s unread feed; restarts the cooldown."""
        if self.running:
            self.stop()
        self._user_id = user_id
        self._generation += 1
        self._started_at_ms = self._scheduler.now_ms()
        generation = self._generation
        self._feed.start(
            user_id,
            on_change=lambda changes: self._scheduler.call_soon(
                lambda: self._on_changes(generation, changes)
            ),
            on_error=lambda exc: self._scheduler.call_soon(
                lambda: self._on_error(generation, exc)
            ),
        )

    def stop(self) -> None:
        """Unsubscribe and drop every queued, displayed and timed banner."""
        self._generation += 1
        self._feed.stop()
        self._cancel_timer()
        self._pending.clear()
        self._current = None
        self._user_id = None

    # Feed callbacks

    def _on_changes(self, generation: int, changes: List[DocumentChange]) -> None:
        if generation != self._generation:
            return
        for change in changes:
            if change.type != "added":
                continue
            try:
                record = NotificationRecord.from_document(change.document)
            except ValidationError as e:
                logger.warning(
                    "inbox_record_invalid", notification_id=change.document.id, error=str(e)
                )
                continue
            self._offer_record(record)
        self._pump()

    def _on_error(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            return
        logger.error("inbox_feed_error", user_id=self._user_id, error=str(exc))

    def _offer_record(self, record: NotificationRecord) -> None:
        if self._app_state != "active":
            logger.debug("inbox_record_ignored", reason="background", id=record.id)
            return
        if self._screen_active:
            logger.debug("inbox_record_ignored", reason="screen_active", id=record.id)
            return
        if self._scheduler.now_ms() - self._started_at_ms < self._settings.INBOX_COOLDOWN_MS:
            logger.debug("inbox_record_ignored", reason="cooldown", id=record.id)
            return
        self._enqueue(
            BannerPayload.from_record(record, duration=self._settings.INBOX_AUTO_DISMISS_MS)
        )

    def _enqueue(self, banner: BannerPayload) -> bool:
        if banner.id in self._viewed or self._is_tracked(banner.id):
            return False
        self._pending.append(banner)
        return True

    def _is_tracked(self, notification_id: str) -> bool:
        if self._current is not None and self._current.id == notification_id:
            return True
        return any(b.id == notification_id for b in self._pending)

    # Display slot

    def _suppressed(self) -> bool:
        return self._app_state != "active" or self._screen_active

    def _pump(self) -> None:
        if self._current is not None or not self._pending or self._suppressed():
            return
        banner = self._pending.popleft()
        self._current = banner
        if banner.auto_dismiss:
            self._timer = self._scheduler.call_later(
                banner.duration, lambda: self._on_timeout(banner.id)
            )
        logger.info("inbox_banner_displayed", id=banner.id, type=banner.type)
        self._on_display(banner)

    def _on_timeout(self, notification_id: str) -> None:
        if self._current is not None and self._current.id == notification_id:
            self.dismiss("timeout")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def show(self, banner: BannerPayload) -> bool:
        """Queue a banner pushed directly by app code.

        Returns:
            False when the id was already shown, queued or on screen
        """
        accepted = self._enqueue(banner)
        self._pump()
        return accepted

    def dismiss(self, reason: DismissReason = "close") -> Optional[BannerPayload]:
        """Take the displayed banner down, mark it viewed, show the next one."""
        banner = self._current
        if banner is None:
            return None
        self._cancel_timer()
        self._current = None
        self._viewed.add(banner.id)
        logger.info("inbox_banner_dismissed", id=banner.id, reason=reason)
        if self._on_hide is not None:
            self._on_hide(banner, reason)
        self._pump()
        return banner

    def tap(self) -> Optional[BannerRoute]:
        """Dismiss the displayed banner and return where the app should navigate."""
        banner = self.dismiss("tap")
        return banner.route() if banner is not None else None

    # UI state

    def set_app_state(self, state: AppState) -> None:
        """Track foreground state; returning to "active" resumes display."""
        self._app_state = state
        self._pump()

    def set_notification_screen_active(self, active: bool) -> None:
        """Block (True) or resume (False) new displays.

        The banner already on screen is left alone.
        """
        self._screen_active = active
        self._pump()

    # Bulk acknowledgement

    def mark_all_as_viewed(self) -> int:
        """Mark every unread record of the user read and clear the queue.

        Writes go out in batches of at most MAX_BATCH_WRITES. A failed batch
        keeps the ones committed before it.

        Returns:
            Number of records marked read; 0 when nothing changed or the
            write failed (queue state is then left as it was)
        """
        if self._user_id is None:
            return 0
        result = self._store.query(
            USER_NOTIFICATIONS,
            filters=[("userId", "==", self._user_id), ("read", "==", False)],
        )
        if not result.is_success:
            logger.error("inbox_mark_all_query_failed", error=result.message)
            return 0
        documents = result.data
        for start in range(0, len(documents), MAX_BATCH_WRITES):
            batch = self._store.batch()
            for document in documents[start : start + MAX_BATCH_WRITES]:
                batch.update(USER_NOTIFICATIONS, document.id, {"read": True})
            commit = batch.commit()
            if not commit.is_success:
                logger.error(
                    "inbox_mark_all_commit_failed", committed=start, error=commit.message
                )
                return 0

        ids = [d.id for d in documents]
        ids.extend(b.id for b in self._pending)
        if self._current is not None:
            ids.append(self._current.id)
        self._viewed.add_many(ids)

        cleared = self._current
        self._cancel_timer()
        self._pending.clear()
        self._current = None
        if cleared is not None and self._on_hide is not None:
            self._on_hide(cleared, "cleared")
        logger.info("inbox_marked_all_viewed", count=len(documents))
        return len(documents)
