"""Typed domain events.

Each trigger receives a raw document-change envelope (infrastructure Event)
and parses it into one of the variants below before any lookup happens. The
variants form a closed union discriminated on ``event_type``.

Envelope mapping:
    chat.message.created  conversations/{conversationId}/messages/{messageId}
    order.created         orders/{orderId}, after = order
    order.updated         orders/{orderId}, before/after = order
    reservation.created   reservations/{reservationId}, after = reservation
    reservation.updated   reservations/{reservationId}, before/after = reservation
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from infrastructure.events import Event
from modules.fanout.domain.errors import EventValidationError

CHAT_MESSAGE_CREATED = "chat.message.created"
ORDER_CREATED = "order.created"
ORDER_UPDATED = "order.updated"
RESERVATION_CREATED = "reservation.created"
RESERVATION_UPDATED = "reservation.updated"


def _as_id(value: Any) -> Any:
    """Ids may arrive as numbers or strings; compare them as strings."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _DomainEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: str
    actor_id: Optional[str] = None

    @field_validator("actor_id", mode="before")
    @classmethod
    def normalize_actor(cls, v: Any) -> Any:
        return _as_id(v)


class ChatMessageEvent(_DomainEvent):
    """A message was added to a conversation."""

    event_type: Literal["chat.message.created"] = CHAT_MESSAGE_CREATED
    conversation_id: str = Field(min_length=1)
    message_id: str = Field(min_length=1)
    sender_id: str = Field(min_length=1)
    sender_name: Optional[str] = None
    text: str = ""
    message_type: str = "text"

    @field_validator("sender_id", mode="before")
    @classmethod
    def normalize_sender(cls, v: Any) -> Any:
        return _as_id(v)


class OrderCreatedEvent(_DomainEvent):
    """A new order was placed with a business."""

    event_type: Literal["order.created"] = ORDER_CREATED
    order_id: str = Field(min_length=1)
    business_id: str = Field(min_length=1)
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    order_number: Optional[str] = None
    total: float = 0
    items: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("customer_id", "order_number", mode="before")
    @classmethod
    def normalize_ids(cls, v: Any) -> Any:
        return _as_id(v)

    @field_validator("items", mode="before")
    @classmethod
    def only_item_maps(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]


class OrderStatusChangedEvent(_DomainEvent):
    """An existing order was updated; status may or may not have changed."""

    event_type: Literal["order.updated"] = ORDER_UPDATED
    order_id: str = Field(min_length=1)
    business_id: Optional[str] = None
    customer_id: Optional[str] = None
    order_number: Optional[str] = None
    previous_status: Optional[str] = None
    new_status: Optional[str] = None

    @field_validator("customer_id", "order_number", mode="before")
    @classmethod
    def normalize_ids(cls, v: Any) -> Any:
        return _as_id(v)

    @property
    def status_changed(self) -> bool:
        return self.previous_status != self.new_status


class ReservationCreatedEvent(_DomainEvent):
    """A customer requested a reservation at a business."""

    event_type: Literal["reservation.created"] = RESERVATION_CREATED
    reservation_id: str = Field(min_length=1)
    business_id: str = Field(min_length=1)
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    business_name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    party_size: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def normalize_ids(cls, v: Any) -> Any:
        return _as_id(v)

    @field_validator("date", "time", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        return v if v is None else str(v)


class ReservationStatusChangedEvent(_DomainEvent):
    """An existing reservation was updated."""

    event_type: Literal["reservation.updated"] = RESERVATION_UPDATED
    reservation_id: str = Field(min_length=1)
    business_id: str = Field(min_length=1)
    customer_id: Optional[str] = None
    business_name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    canceled_by: Optional[Literal["customer", "business"]] = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def normalize_ids(cls, v: Any) -> Any:
        return _as_id(v)

    @field_validator("date", "time", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        return v if v is None else str(v)

    @field_validator("canceled_by", mode="before")
    @classmethod
    def unknown_attribution(cls, v: Any) -> Any:
        return v if v in ("customer", "business") else None

    @property
    def status_changed(self) -> bool:
        return self.previous_status != self.new_status

    @property
    def canceled_by_customer(self) -> bool:
        return self.new_status == "canceled" and self.canceled_by == "customer"


DomainEvent = Annotated[
    Union[
        ChatMessageEvent,
        OrderCreatedEvent,
        OrderStatusChangedEvent,
        ReservationCreatedEvent,
        ReservationStatusChangedEvent,
    ],
    Field(discriminator="event_type"),
]

_domain_event_adapter = TypeAdapter(DomainEvent)


def _chat_fields(event: Event) -> Dict[str, Any]:
    message = event.after or {}
    return {
        "conversation_id": event.params.get("conversationId"),
        "message_id": event.params.get("messageId"),
        "sender_id": message.get("senderId"),
        "sender_name": message.get("senderName"),
        "text": message.get("text"),
        "message_type": message.get("type"),
        "actor_id": event.actor_id or message.get("senderId"),
    }


def _order_created_fields(event: Event) -> Dict[str, Any]:
    order = event.after or {}
    return {
        "order_id": event.params.get("orderId"),
        "business_id": order.get("businessId"),
        "customer_id": order.get("userId"),
        "customer_name": order.get("userName"),
        "order_number": order.get("orderNumber"),
        "total": order.get("total"),
        "items": order.get("items") or [],
        "actor_id": event.actor_id or order.get("userId"),
    }


def _order_updated_fields(event: Event) -> Dict[str, Any]:
    if event.before is None or event.after is None:
        raise EventValidationError(
            "Order update needs both document states",
            details={"order_id": event.params.get("orderId")},
        )
    order = event.after
    return {
        "order_id": event.params.get("orderId"),
        "business_id": order.get("businessId"),
        "customer_id": order.get("userId"),
        "order_number": order.get("orderNumber"),
        "previous_status": event.before.get("status"),
        "new_status": order.get("status"),
        "actor_id": event.actor_id,
    }


def _reservation_created_fields(event: Event) -> Dict[str, Any]:
    reservation = event.after or {}
    return {
        "reservation_id": event.params.get("reservationId"),
        "business_id": reservation.get("businessId"),
        "customer_id": reservation.get("userId"),
        "customer_name": reservation.get("userName"),
        "business_name": reservation.get("businessName"),
        "date": reservation.get("date"),
        "time": reservation.get("time"),
        "party_size": reservation.get("partySize"),
        "notes": reservation.get("notes"),
        "actor_id": event.actor_id,
    }


def _reservation_updated_fields(event: Event) -> Dict[str, Any]:
    if event.before is None or event.after is None:
        raise EventValidationError(
            "Reservation update needs both document states",
            details={"reservation_id": event.params.get("reservationId")},
        )
    reservation = event.after
    return {
        "reservation_id": event.params.get("reservationId"),
        "business_id": reservation.get("businessId"),
        "customer_id": reservation.get("userId"),
        "business_name": reservation.get("businessName"),
        "date": reservation.get("date"),
        "time": reservation.get("time"),
        "previous_status": event.before.get("status"),
        "new_status": reservation.get("status"),
        "canceled_by": reservation.get("canceledBy"),
        "actor_id": event.actor_id,
    }


_FIELD_EXTRACTORS = {
    CHAT_MESSAGE_CREATED: _chat_fields,
    ORDER_CREATED: _order_created_fields,
    ORDER_UPDATED: _order_updated_fields,
    RESERVATION_CREATED: _reservation_created_fields,
    RESERVATION_UPDATED: _reservation_updated_fields,
}

EVENT_TYPES = tuple(_FIELD_EXTRACTORS)


def parse_event(event: Event) -> DomainEvent:
    """Parse a raw envelope into its typed domain event.

    Args:
        event: Envelope delivered for one document write

    Returns:
        The matching DomainEvent variant

    Raises:
        EventValidationError: Unknown event type, missing document state or
            missing required fields.
    """
    extractor = _FIELD_EXTRACTORS.get(event.event_type)
    if extractor is None:
        raise EventValidationError(f"Unsupported event type: {event.event_type}")
    fields = extractor(event)
    raw = {k: v for k, v in fields.items() if v is not None}
    raw["event_type"] = event.event_type
    raw["event_id"] = event.event_id
    try:
        return _domain_event_adapter.validate_python(raw)
    except ValidationError as e:
        raise EventValidationError(
            f"Invalid {event.event_type} event",
            details=e.errors(include_url=False),
        ) from e
