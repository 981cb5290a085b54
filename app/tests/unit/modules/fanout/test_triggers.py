"""End-to-end trigger tests over the in-memory document store."""

from unittest.mock import MagicMock, patch

import pytest

from infrastructure.events import dispatch_event
from infrastructure.operations import OperationResult
from modules.fanout import register_triggers
from modules.fanout.domain import (
    CHAT_MESSAGE_CREATED,
    ORDER_CREATED,
    ORDER_UPDATED,
    RESERVATION_CREATED,
    RESERVATION_UPDATED,
)
from tests.factories import make_business_docs, make_event, make_user_doc

pytestmark = pytest.mark.unit


def _seed(users, conversations=None, **business_kwargs):
    data = {"users": users}
    if business_kwargs:
        data.update(make_business_docs(**business_kwargs))
    if conversations:
        data["conversations"] = conversations
    return data


def _inbox(store):
    return [doc.data for doc in store.query("user_notifications").data]


def _badge(store, user_id):
    return store.get("users", user_id).data.get("badgeCount")


class TestChatMessageCreated:
    @pytest.fixture
    def chat_env(self, fanout_env_factory):
        return fanout_env_factory(
            _seed(
                users={
                    "A": make_user_doc(primary="ExponentPushToken[a]"),
                    "B": make_user_doc(primary="fcm-b", devices=["ExponentPushToken[b]"]),
                },
                conversations={"c1": {"participants": ["A", "B"]}},
            )
        )

    def _message(self, **after):
        message = {"senderId": "A", "senderName": "Ana", "text": "Hola", "type": "text"}
        message.update(after)
        return make_event(
            CHAT_MESSAGE_CREATED,
            after=message,
            params={"conversationId": "c1", "messageId": "m1"},
        )

    def test_notifies_other_participant_on_both_channels(self, chat_env):
        """A message from A in a conversation of A and B reaches only B."""
        outcome = chat_env.triggers.on_chat_message_created(self._message())

        assert outcome.recipients == {"recipients": ["B"]}
        assert chat_env.fcm.sent_tokens == ["fcm-b"]
        assert chat_env.expo.sent_tokens == ["ExponentPushToken[b]"]
        assert outcome.total.sent == 2

        payload = chat_env.fcm.sends[0][1]
        assert payload.title == "Ana"
        assert payload.body == "Hola"
        assert payload.channel_id == "chat-messages"
        assert payload.data["conversationId"] == "c1"
        assert payload.data["senderId"] == "A"

    def test_increments_badge_once_and_uses_it(self, chat_env):
        """B's counter goes 0 -> 1 in one commit and the push carries 1."""
        chat_env.triggers.on_chat_message_created(self._message())

        assert _badge(chat_env.store, "B") == 1
        assert _badge(chat_env.store, "A") == 0
        assert chat_env.store.commit_count == 1
        assert chat_env.fcm.sends[0][1].badge == 1

    def test_writes_inbox_record_per_recipient(self, chat_env):
        """Each notified recipient gets an unread user_notifications record."""
        chat_env.triggers.on_chat_message_created(self._message())

        records = _inbox(chat_env.store)
        assert len(records) == 1
        assert records[0]["userId"] == "B"
        assert records[0]["type"] == "chat"
        assert records[0]["title"] == "Ana"
        assert records[0]["message"] == "Hola"
        assert records[0]["read"] is False
        assert records[0]["createdAt"] is not None

    def test_inbox_write_can_be_disabled(self, fanout_env_factory, settings_factory):
        """INBOX_WRITE_ENABLED=False sends pushes without inbox records."""
        env = fanout_env_factory(
            _seed(
                users={"B": make_user_doc(primary="fcm-b")},
                conversations={"c1": {"participants": ["A", "B"]}},
            ),
            settings=settings_factory(fanout={"INBOX_WRITE_ENABLED": False}),
        )

        outcome = env.triggers.on_chat_message_created(self._message())

        assert outcome.total.fcm_sent == 1
        assert _inbox(env.store) == []

    def test_image_message_body(self, chat_env):
        """Image messages are announced instead of echoing the text."""
        chat_env.triggers.on_chat_message_created(self._message(type="image", text=""))

        assert chat_env.fcm.sends[0][1].body == "Ana te ha enviado una imagen"

    def test_numeric_sender_id_is_excluded(self, fanout_env_factory):
        """A numeric senderId still matches its string participant id."""
        env = fanout_env_factory(
            _seed(
                users={
                    "7": make_user_doc(primary="fcm-7"),
                    "B": make_user_doc(primary="fcm-b"),
                },
                conversations={"c1": {"participants": ["7", "B"]}},
            )
        )

        outcome = env.triggers.on_chat_message_created(self._message(senderId=7))

        assert outcome.recipients == {"recipients": ["B"]}
        assert env.fcm.sent_tokens == ["fcm-b"]

    def test_actor_tokens_are_never_targeted(self, fanout_env_factory):
        """A device shared by sender and recipient is dropped from the send."""
        env = fanout_env_factory(
            _seed(
                users={
                    "A": make_user_doc(primary="ExponentPushToken[shared]"),
                    "B": make_user_doc(
                        primary="fcm-b", devices=["ExponentPushToken[shared]"]
                    ),
                },
                conversations={"c1": {"participants": ["A", "B"]}},
            )
        )

        env.triggers.on_chat_message_created(self._message())

        assert env.fcm.sent_tokens == ["fcm-b"]
        assert env.expo.sends == []

    def test_recipient_without_tokens_yields_no_outcome(self, fanout_env_factory):
        """Zero tokens: nothing sent, no badge write, no error."""
        env = fanout_env_factory(
            _seed(
                users={"B": make_user_doc()},
                conversations={"c1": {"participants": ["A", "B"]}},
            )
        )

        outcome = env.triggers.on_chat_message_created(self._message())

        assert outcome is None
        assert env.fcm.sends == []
        assert env.expo.sends == []
        assert _badge(env.store, "B") == 0
        assert env.store.commit_count == 0

    def test_missing_conversation_is_a_no_op(self, fanout_env_factory):
        """An unknown conversation resolves nobody."""
        env = fanout_env_factory(_seed(users={"B": make_user_doc(primary="fcm-b")}))

        assert env.triggers.on_chat_message_created(self._message()) is None
        assert env.fcm.sends == []

    def test_failed_tokens_are_counted(self, fanout_env_factory):
        """Per-token failures are tallied in the outcome, not raised."""
        env = fanout_env_factory(
            _seed(
                users={"B": make_user_doc(primary="fcm-b", devices=["fcm-b2"])},
                conversations={"c1": {"participants": ["A", "B"]}},
            ),
            failing_tokens=["fcm-b2"],
        )

        outcome = env.triggers.on_chat_message_created(self._message())

        assert outcome.groups["recipients"].fcm_sent == 1
        assert outcome.groups["recipients"].fcm_failed == 1


class TestOrderCreated:
    @pytest.fixture
    def order_env(self, fanout_env_factory):
        return fanout_env_factory(
            _seed(
                users={
                    "owner-1": make_user_doc(primary="fcm-owner"),
                    "manager-1": make_user_doc(devices=["ExponentPushToken[mgr]"]),
                    "staff-1": make_user_doc(primary="fcm-staff"),
                    "U1": make_user_doc(primary="fcm-customer"),
                },
                staff={"manager-1": "manager", "staff-1": "staff"},
            )
        )

    def _order(self, **after):
        order = {
            "businessId": "biz-1",
            "userId": "U1",
            "userName": "Luis",
            "orderNumber": "#A1",
            "total": 120,
            "items": [{"name": "Tacos"}, {"name": "Agua"}],
        }
        order.update(after)
        return make_event(ORDER_CREATED, after=order, params={"orderId": "order-123456789"})

    def test_notifies_owner_and_privileged_staff(self, order_env):
        """Owner and manager are notified; plain staff and the customer are not."""
        outcome = order_env.triggers.on_order_created(self._order())

        assert outcome.recipients == {"business": ["owner-1", "manager-1"]}
        assert order_env.fcm.sent_tokens == ["fcm-owner"]
        assert order_env.expo.sent_tokens == ["ExponentPushToken[mgr]"]

    def test_staff_lookups_run_once(self, order_env):
        """Business and permission documents are read once per event."""
        store = order_env.store
        with patch.object(store, "query", wraps=store.query) as query, patch.object(
            store, "get", wraps=store.get
        ) as get:
            order_env.triggers.on_order_created(self._order())

        assert query.call_count == 1
        assert [c.args for c in get.call_args_list].count(("businesses", "biz-1")) == 1

    def test_copy(self, order_env):
        """Order copy names the number, total, items and customer."""
        order_env.triggers.on_order_created(self._order())

        payload = order_env.fcm.sends[0][1]
        assert payload.title == "¡Nuevo Pedido! 💰"
        assert payload.body == "Pedido #A1 - $120.00 | Tacos y 1 producto(s) más | De: Luis"
        assert payload.data["type"] == "order_new"
        assert payload.data["orderNumber"] == "#A1"
        assert payload.channel_id == "orders"

    def test_order_number_defaults_to_id_prefix(self, order_env):
        """Without orderNumber the first six id characters are used."""
        order_env.triggers.on_order_created(self._order(orderNumber=None))

        payload = order_env.fcm.sends[0][1]
        assert payload.body.startswith("Pedido #order- - $120.00")
        assert payload.data["orderNumber"] == "#order-"

    def test_redelivery_returns_cached_outcome(self, order_env):
        """The same event id delivered twice sends and increments once."""
        event = self._order()

        first = order_env.triggers.on_order_created(event)
        second = order_env.triggers.on_order_created(event)

        assert second.to_response() == first.to_response()
        assert len(order_env.fcm.sends) == 1
        assert _badge(order_env.store, "owner-1") == 1

    def test_badge_commit_failure_still_dispatches(self, order_env):
        """A failed badge commit is reported but the push still goes out."""
        failing_batch = MagicMock()
        failing_batch.commit.return_value = OperationResult.transient_error("unavailable")

        with patch.object(order_env.store, "batch", return_value=failing_batch):
            outcome = order_env.triggers.on_order_created(self._order())

        assert outcome.badge_committed is False
        assert outcome.total.sent == 2


class TestOrderUpdated:
    @pytest.fixture
    def order_env(self, fanout_env_factory):
        return fanout_env_factory(
            _seed(
                users={
                    "owner-1": make_user_doc(primary="fcm-owner"),
                    "U1": make_user_doc(primary="fcm-customer"),
                },
                business_id="biz-1",
            )
        )

    def _update(self, before_status, after_status, **kwargs):
        base = {"businessId": "biz-1", "userId": "U1", "orderNumber": "#A1"}
        return make_event(
            ORDER_UPDATED,
            before={**base, "status": before_status},
            after={**base, "status": after_status},
            params={"orderId": "o1"},
            **kwargs,
        )

    def test_unchanged_status_performs_no_writes(self, order_env):
        """paid -> paid: no push, no badge write, no inbox record."""
        outcome = order_env.triggers.on_order_updated(self._update("paid", "paid"))

        assert outcome is None
        assert order_env.fcm.sends == []
        assert order_env.store.commit_count == 0
        assert _inbox(order_env.store) == []

    def test_status_change_notifies_customer(self, order_env):
        """pending -> paid reaches the customer only."""
        outcome = order_env.triggers.on_order_updated(self._update("pending", "paid"))

        assert outcome.recipients == {"recipients": ["U1"]}
        payload = order_env.fcm.sends[0][1]
        assert payload.title == "Estado del Pedido Actualizado"
        assert payload.body == "Tu pedido #A1 ha sido pagado con éxito."
        assert payload.data["status"] == "paid"

    def test_cancellation_also_alerts_owner(self, order_env):
        """canceled adds the business owner to the recipients."""
        outcome = order_env.triggers.on_order_updated(self._update("paid", "canceled"))

        assert outcome.recipients == {"recipients": ["U1", "owner-1"]}
        assert order_env.fcm.sent_tokens == ["fcm-customer", "fcm-owner"]
        assert order_env.fcm.sends[0][1].title == "Pedido Cancelado"

    def test_actor_is_not_notified(self, order_env):
        """The owner canceling the order is not alerted about it."""
        outcome = order_env.triggers.on_order_updated(
            self._update("paid", "canceled", actor_id="owner-1")
        )

        assert outcome.recipients == {"recipients": ["U1"]}

    def test_unknown_status_uses_generic_copy(self, order_env):
        """Statuses without dedicated copy fall back to the generic body."""
        order_env.triggers.on_order_updated(self._update("paid", "on_hold"))

        assert order_env.fcm.sends[0][1].body == "Tu pedido #A1 ahora está en estado: on_hold."

    def test_missing_before_state_is_skipped(self, order_env):
        """An update envelope without the previous state is rejected quietly."""
        event = make_event(
            ORDER_UPDATED,
            after={"businessId": "biz-1", "userId": "U1", "status": "paid"},
            params={"orderId": "o1"},
        )

        assert order_env.triggers.on_order_updated(event) is None
        assert order_env.fcm.sends == []


class TestReservationCreated:
    @pytest.fixture
    def reservation_env(self, fanout_env_factory):
        return fanout_env_factory(
            _seed(
                users={
                    "owner-1": make_user_doc(primary="fcm-owner", badge=4),
                    "U2": make_user_doc(primary="fcm-customer"),
                },
                business_id="biz-1",
            )
        )

    def _reservation(self):
        return make_event(
            RESERVATION_CREATED,
            after={
                "businessId": "biz-1",
                "userId": "U2",
                "userName": "María",
                "businessName": "Tacos El Güero",
                "date": "2026-10-20",
                "time": "20:00",
                "partySize": 4,
                "notes": "Mesa junto a la ventana",
            },
            params={"reservationId": "r1"},
        )

    def test_business_and_customer_get_separate_copy(self, reservation_env):
        """Owner and customer are notified in two sends with distinct copy."""
        outcome = reservation_env.triggers.on_reservation_created(self._reservation())

        assert outcome.recipients == {"business": ["owner-1"], "customer": ["U2"]}
        assert len(reservation_env.fcm.sends) == 2
        business_tokens, business_payload = reservation_env.fcm.sends[0]
        customer_tokens, customer_payload = reservation_env.fcm.sends[1]
        assert business_tokens == ["fcm-owner"]
        assert business_payload.title == "Nueva Reservación"
        assert business_payload.body == (
            "María reservó para 4 persona(s) el 2026-10-20 a las 20:00"
            " | Nota: Mesa junto a la ventana"
        )
        assert customer_tokens == ["fcm-customer"]
        assert customer_payload.title == "Reservación Recibida"
        assert "Tacos El Güero" in customer_payload.body

    def test_single_badge_commit_and_first_recipient_badge(self, reservation_env):
        """Both counters move in one commit; every push carries the first recipient's badge."""
        reservation_env.triggers.on_reservation_created(self._reservation())

        assert reservation_env.store.commit_count == 1
        assert _badge(reservation_env.store, "owner-1") == 5
        assert _badge(reservation_env.store, "U2") == 1
        assert [payload.badge for _, payload in reservation_env.fcm.sends] == [5, 5]

    def test_inbox_records_follow_group_copy(self, reservation_env):
        """Each recipient's inbox record carries its group's copy."""
        reservation_env.triggers.on_reservation_created(self._reservation())

        titles = {record["userId"]: record["title"] for record in _inbox(reservation_env.store)}
        assert titles == {"owner-1": "Nueva Reservación", "U2": "Reservación Recibida"}


class TestReservationUpdated:
    @pytest.fixture
    def reservation_env(self, fanout_env_factory):
        return fanout_env_factory(
            _seed(
                users={
                    "owner-1": make_user_doc(primary="fcm-owner"),
                    "manager-1": make_user_doc(primary="fcm-manager"),
                    "U2": make_user_doc(primary="fcm-customer"),
                },
                staff={"manager-1": "admin"},
            )
        )

    def _update(self, after_status, canceled_by=None, actor_id=None):
        base = {
            "businessId": "biz-1",
            "userId": "U2",
            "businessName": "Tacos El Güero",
            "date": "2026-10-20",
            "time": "20:00",
        }
        after = {**base, "status": after_status}
        if canceled_by:
            after["canceledBy"] = canceled_by
        return make_event(
            RESERVATION_UPDATED,
            before={**base, "status": "pending"},
            after=after,
            params={"reservationId": "r1"},
            actor_id=actor_id,
        )

    def test_confirmation_notifies_customer_only(self, reservation_env):
        """A confirmed reservation reaches the customer."""
        outcome = reservation_env.triggers.on_reservation_updated(self._update("confirmed"))

        assert outcome.recipients == {"customer": ["U2"]}
        payload = reservation_env.fcm.sends[0][1]
        assert payload.title == "Reservación Confirmada"
        assert payload.body == (
            "Tu reservación en Tacos El Güero el 2026-10-20 a las 20:00 ha sido confirmada."
        )

    def test_customer_cancellation_notifies_customer_and_staff(self, reservation_env):
        """Customer-initiated cancel: the customer gets the status copy, staff the dedicated one."""
        outcome = reservation_env.triggers.on_reservation_updated(
            self._update("canceled", canceled_by="customer", actor_id="U2")
        )

        assert outcome.recipients == {
            "customer": ["U2"],
            "business": ["owner-1", "manager-1"],
        }
        sends = {tuple(tokens): payload for tokens, payload in reservation_env.fcm.sends}
        assert sends[("fcm-customer",)].title == "Reservación Cancelada"
        assert sends[("fcm-owner", "fcm-manager")].title == (
            "Reservación Cancelada por el Cliente"
        )

    def test_business_cancellation_notifies_customer_only(self, reservation_env):
        """Business-initiated cancel never alerts the staff."""
        outcome = reservation_env.triggers.on_reservation_updated(
            self._update("canceled", canceled_by="business", actor_id="owner-1")
        )

        assert outcome.recipients == {"customer": ["U2"]}
        assert reservation_env.fcm.sends[0][1].title == "Reservación Cancelada"


class TestTriggerRegistration:
    def test_dispatch_routes_to_registered_trigger(self, fanout_env_factory):
        """register_triggers wires every event type into dispatch_event."""
        env = fanout_env_factory(
            _seed(
                users={"B": make_user_doc(primary="fcm-b")},
                conversations={"c1": {"participants": ["A", "B"]}},
            )
        )
        register_triggers(env.triggers)

        results = dispatch_event(
            make_event(
                CHAT_MESSAGE_CREATED,
                after={"senderId": "A", "text": "Hola"},
                params={"conversationId": "c1", "messageId": "m1"},
            )
        )

        assert len(results) == 1
        assert results[0].recipients == {"recipients": ["B"]}

    def test_pipeline_error_is_contained(self, fanout_env_factory):
        """An unexpected pipeline error yields None instead of raising."""
        env = fanout_env_factory({})
        env.triggers.pipeline.run = MagicMock(side_effect=RuntimeError("boom"))

        event = make_event(
            CHAT_MESSAGE_CREATED,
            after={"senderId": "A", "text": "Hola"},
            params={"conversationId": "c1", "messageId": "m1"},
        )

        assert env.triggers.on_chat_message_created(event) is None
