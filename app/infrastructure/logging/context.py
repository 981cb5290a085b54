"""Invocation context binding for structured logging.

Binds a correlation id and event metadata to every log line emitted while
a trigger or an HTTP request is being processed.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(event_type="order.created", event_id="evt-1"):
        logger.info("trigger_started")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    event_type: Optional[str] = None,
    event_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind invocation-scoped context to all logs within the block.

    Args:
        correlation_id: Unique invocation id. Auto-generated if not provided.
        user_id: Authenticated caller or acting user, if any.
        event_type: Domain event type being processed.
        event_id: Platform delivery id of the event.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    if user_id is not None:
        context["user_id"] = user_id
    if event_type is not None:
        context["event_type"] = event_type
    if event_id is not None:
        context["event_id"] = event_id
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")


def clear_request_context() -> None:
    """Clear all invocation-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
