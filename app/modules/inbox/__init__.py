"""Client notification inbox.

In-app banner queue fed by the user's unread ``user_notifications`` feed.

Usage:
    queue = NotificationQueue(
        store,
        ViewedSet(JsonFileStore(settings.inbox.INBOX_VIEWED_PATH)),
        AsyncioScheduler(),
        settings.inbox,
        on_display=render_banner,
    )
    queue.start(user_id)
"""

from modules.inbox.feed import LiveFeed
from modules.inbox.models import BannerPayload, BannerRoute, NotificationRecord
from modules.inbox.queue import NotificationQueue
from modules.inbox.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from modules.inbox.viewed import (
    JsonFileStore,
    KeyValueStore,
    MemoryKeyValueStore,
    ViewedSet,
)

__all__ = [
    "BannerPayload",
    "BannerRoute",
    "NotificationRecord",
    "LiveFeed",
    "NotificationQueue",
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileStore",
    "ViewedSet",
]
