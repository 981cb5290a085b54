"""Event triggers.

One handler per document-change event type. Each handler binds the
invocation's logging context, parses the envelope into its typed event and
hands it to the FanoutPipeline with the copy renderers of its recipient
groups. Handlers never raise: invalid events and unexpected errors are
logged and yield None.

Usage:
    triggers = FanoutTriggers(build_context())
    register_triggers(triggers)
    dispatch_event(Event(event_type="order.created", after={...}, params={...}))
"""

from typing import Dict, Optional

from core.logging import get_module_logger
from infrastructure.events import Event, register_event_handler
from infrastructure.logging import bind_request_context
from modules.fanout import copy
from modules.fanout.context import FanoutContext
from modules.fanout.domain import (
    BUSINESS_GROUP,
    CHAT_MESSAGE_CREATED,
    CUSTOMER_GROUP,
    ORDER_CREATED,
    ORDER_UPDATED,
    RECIPIENTS_GROUP,
    RESERVATION_CREATED,
    RESERVATION_UPDATED,
    EventValidationError,
    TriggerOutcome,
    parse_event,
)
from modules.fanout.pipeline import FanoutPipeline, Renderer

logger = get_module_logger()


class FanoutTriggers:
    """Trigger handlers bound to one FanoutContext."""

    def __init__(self, context: FanoutContext):
        self.context = context
        self.pipeline = FanoutPipeline(context)

    def on_chat_message_created(self, event: Event) -> Optional[TriggerOutcome]:
        """New chat message: notify the other participants."""
        return self._handle(event, {RECIPIENTS_GROUP: copy.render_chat})

    def on_order_created(self, event: Event) -> Optional[TriggerOutcome]:
        """New order: notify the business owner and privileged staff."""
        return self._handle(event, {BUSINESS_GROUP: copy.render_order_created})

    def on_order_updated(self, event: Event) -> Optional[TriggerOutcome]:
        """Order status change: notify the customer (and owner on cancel/refund)."""
        return self._handle(event, {RECIPIENTS_GROUP: copy.render_order_status})

    def on_reservation_created(self, event: Event) -> Optional[TriggerOutcome]:
        """New reservation: business staff and customer get distinct copy."""
        return self._handle(
            event,
            {
                BUSINESS_GROUP: copy.render_reservation_for_business,
                CUSTOMER_GROUP: copy.render_reservation_for_customer,
            },
        )

    def on_reservation_updated(self, event: Event) -> Optional[TriggerOutcome]:
        """Reservation status change; staff only hear of customer cancellations."""
        return self._handle(
            event,
            {
                CUSTOMER_GROUP: copy.render_reservation_status,
                BUSINESS_GROUP: copy.render_reservation_canceled_by_customer,
            },
        )

    def _handle(
        self, event: Event, renderers: Dict[str, Renderer]
    ) -> Optional[TriggerOutcome]:
        with bind_request_context(
            correlation_id=str(event.correlation_id),
            event_type=event.event_type,
            event_id=event.event_id,
        ):
            try:
                domain_event = parse_event(event)
            except EventValidationError as e:
                logger.warning("invalid_event_skipped", error=e.message, details=e.details)
                return None
            try:
                return self.pipeline.run(domain_event, renderers)
            except Exception as e:
                logger.error("trigger_failed", error=str(e), exc_info=True)
                return None


def register_triggers(triggers: FanoutTriggers) -> None:
    """Register every trigger with the in-process event dispatcher."""
    register_event_handler(CHAT_MESSAGE_CREATED)(triggers.on_chat_message_created)
    register_event_handler(ORDER_CREATED)(triggers.on_order_created)
    register_event_handler(ORDER_UPDATED)(triggers.on_order_updated)
    register_event_handler(RESERVATION_CREATED)(triggers.on_reservation_created)
    register_event_handler(RESERVATION_UPDATED)(triggers.on_reservation_updated)
