from types import SimpleNamespace

import pytest

from infrastructure.notifications import PushDispatcher
from infrastructure.persistence import MemoryDocumentStore
from modules.fanout import FanoutTriggers, build_context
from tests.fakes import RecordingChannel


@pytest.fixture
def fanout_env_factory(test_settings):
    """Factory for a fan-out context over a seeded MemoryDocumentStore.

    Returns a namespace with ``store``, ``fcm``, ``expo``, ``context`` and
    ``triggers``. Worker pools are shut down after the test.
    """
    contexts = []

    def _factory(initial=None, settings=None, failing_tokens=(), store=None):
        store = store if store is not None else MemoryDocumentStore(initial)
        fcm = RecordingChannel("fcm", failing_tokens=failing_tokens)
        expo = RecordingChannel("expo", failing_tokens=failing_tokens)
        context = build_context(
            settings or test_settings,
            store=store,
            dispatcher=PushDispatcher({"fcm": fcm, "expo": expo}),
        )
        contexts.append(context)
        return SimpleNamespace(
            store=store,
            fcm=fcm,
            expo=expo,
            context=context,
            triggers=FanoutTriggers(context),
        )

    yield _factory

    for context in contexts:
        context.close()
