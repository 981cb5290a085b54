from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from infrastructure.configuration.features import InboxFeatureSettings
from infrastructure.persistence import MemoryDocumentStore
from modules.inbox import MemoryKeyValueStore, NotificationQueue, ViewedSet
from tests.fakes import ManualScheduler

BASE_TIME = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def add_record():
    """Add an unread user_notifications record and return its id.

    ``minute`` orders records: higher is newer.
    """

    def _add(store, minute, user_id="U1", **fields):
        data = {
            "userId": user_id,
            "title": f"Aviso {minute}",
            "message": "Hola",
            "type": "system",
            "data": {},
            "read": False,
            "createdAt": BASE_TIME + timedelta(minutes=minute),
        }
        data.update(fields)
        return store.add("user_notifications", data).data

    return _add


@pytest.fixture
def queue_factory():
    """Factory for a NotificationQueue over a memory store and manual clock.

    Returns a namespace with ``queue``, ``store``, ``scheduler``, ``viewed``,
    ``displayed`` (banner ids in display order) and ``hidden`` ((id, reason)).
    """

    def _factory(store=None, cooldown_ms=3000, auto_dismiss_ms=5000, feed_limit=5):
        env = SimpleNamespace(
            store=store if store is not None else MemoryDocumentStore(),
            scheduler=ManualScheduler(),
            viewed=ViewedSet(MemoryKeyValueStore()),
            displayed=[],
            hidden=[],
        )
        settings = InboxFeatureSettings(
            INBOX_FEED_LIMIT=feed_limit,
            INBOX_COOLDOWN_MS=cooldown_ms,
            INBOX_AUTO_DISMISS_MS=auto_dismiss_ms,
        )
        env.queue = NotificationQueue(
            env.store,
            env.viewed,
            env.scheduler,
            settings,
            on_display=lambda banner: env.displayed.append(banner.id),
            on_hide=lambda banner, reason: env.hidden.append((banner.id, reason)),
        )
        return env

    return _factory
