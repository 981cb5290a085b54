from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from infrastructure.notifications import PushDispatcher
from infrastructure.persistence import MemoryDocumentStore
from modules.fanout import FanoutTriggers, build_context, register_triggers
from server import server
from tests.factories import make_user_doc
from tests.fakes import RecordingChannel


@pytest.fixture
def api_env(test_settings):
    """TestClient over the application with a fan-out context on app.state.

    The lifespan is not entered; triggers are registered here instead.
    """
    store = MemoryDocumentStore(
        {
            "users": {
                "A": make_user_doc(primary="ExponentPushToken[a]"),
                "B": make_user_doc(primary="fcm-b", devices=["ExponentPushToken[b]"], badge=2),
            },
            "conversations": {"c1": {"participants": ["A", "B"]}},
        }
    )
    fcm = RecordingChannel("fcm")
    expo = RecordingChannel("expo")
    context = build_context(
        test_settings,
        store=store,
        dispatcher=PushDispatcher({"fcm": fcm, "expo": expo}),
    )
    server.handler.state.fanout = context
    register_triggers(FanoutTriggers(context))

    yield SimpleNamespace(
        client=TestClient(server.handler),
        store=store,
        fcm=fcm,
        expo=expo,
        context=context,
    )

    server.handler.dependency_overrides.clear()
    server.handler.state.fanout = None
    context.close()
