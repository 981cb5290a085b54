"""Infrastructure event system - in-process event dispatcher.

Usage:

    from infrastructure.events import Event, register_event_handler, dispatch_event

    @register_event_handler("order.created")
    def handle_order_created(event: Event):
        ...

    dispatch_event(Event(event_type="order.created", after={...}, params={...}))
"""

from infrastructure.events.dispatcher import (
    clear_handlers,
    dispatch_event,
    get_handlers_for_event,
    get_registered_events,
    register_event_handler,
)
from infrastructure.events.models import Event

__all__ = [
    "Event",
    "clear_handlers",
    "dispatch_event",
    "get_handlers_for_event",
    "get_registered_events",
    "register_event_handler",
]
