"""Event dispatcher for the infrastructure event system.

In-process handler registry. Handlers are registered per event type and
called synchronously when an event is dispatched; a failing handler is
logged and never stops the others.
"""

from typing import Any, Callable, Dict, List

from core.logging import get_module_logger
from infrastructure.events.models import Event

logger = get_module_logger()

# Event handler registry: event_type -> list of handlers
EVENT_HANDLERS: Dict[str, List[Callable]] = {}


def register_event_handler(event_type: str):
    """Decorator to register an event handler for a specific event type.

    Also usable directly on bound methods:
    ``register_event_handler("order.created")(triggers.on_order_created)``.

    Args:
        event_type: The type of event to handle (e.g., 'order.created').

    Returns:
        Decorator function that registers the handler.
    """

    def decorator(handler_func: Callable) -> Callable:
        EVENT_HANDLERS.setdefault(event_type, []).append(handler_func)
        logger.debug(
            "registered_event_handler",
            handler=getattr(handler_func, "__name__", "unknown"),
            event_type=event_type,
            total_handlers=len(EVENT_HANDLERS[event_type]),
        )
        return handler_func

    return decorator


def dispatch_event(event: Event) -> List[Any]:
    """Dispatch event synchronously to all registered handlers.

    Args:
        event: The event to dispatch.

    Returns:
        List of return values from the handlers that completed.
    """
    results = []
    handlers = EVENT_HANDLERS.get(event.event_type, [])

    logger.info(
        "dispatching_event",
        event_type=event.event_type,
        event_id=event.event_id,
        handler_count=len(handlers),
        correlation_id=str(event.correlation_id),
    )

    for handler in handlers:
        try:
            results.append(handler(event))
        except Exception as e:
            logger.error(
                "event_handler_failed",
                handler=getattr(handler, "__name__", "unknown"),
                event_type=event.event_type,
                error=str(e),
                correlation_id=str(event.correlation_id),
                exc_info=True,
            )

    return results


def get_registered_events() -> List[str]:
    """Event types that have at least one handler."""
    return list(EVENT_HANDLERS.keys())


def get_handlers_for_event(event_type: str) -> List[Callable]:
    """All handlers registered for ``event_type``."""
    return EVENT_HANDLERS.get(event_type, [])


def clear_handlers() -> None:
    """Clear all registered handlers.

    WARNING: This is intended for testing and application shutdown.
    """
    EVENT_HANDLERS.clear()
    logger.debug("cleared_all_event_handlers")
