"""Domain layer - events, models and errors."""

from modules.fanout.domain.errors import (
    EventValidationError,
    FanoutError,
    InternalError,
    Unauthenticated,
)
from modules.fanout.domain.events import (
    CHAT_MESSAGE_CREATED,
    EVENT_TYPES,
    ORDER_CREATED,
    ORDER_UPDATED,
    RESERVATION_CREATED,
    RESERVATION_UPDATED,
    ChatMessageEvent,
    DomainEvent,
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    ReservationCreatedEvent,
    ReservationStatusChangedEvent,
    parse_event,
)
from modules.fanout.domain.models import (
    BUSINESS_GROUP,
    CUSTOMER_GROUP,
    RECIPIENTS_GROUP,
    RecipientGroup,
    TriggerOutcome,
    UserTokenProfile,
)

__all__ = [
    "FanoutError",
    "EventValidationError",
    "Unauthenticated",
    "InternalError",
    "CHAT_MESSAGE_CREATED",
    "ORDER_CREATED",
    "ORDER_UPDATED",
    "RESERVATION_CREATED",
    "RESERVATION_UPDATED",
    "EVENT_TYPES",
    "DomainEvent",
    "ChatMessageEvent",
    "OrderCreatedEvent",
    "OrderStatusChangedEvent",
    "ReservationCreatedEvent",
    "ReservationStatusChangedEvent",
    "parse_event",
    "BUSINESS_GROUP",
    "CUSTOMER_GROUP",
    "RECIPIENTS_GROUP",
    "RecipientGroup",
    "TriggerOutcome",
    "UserTokenProfile",
]
