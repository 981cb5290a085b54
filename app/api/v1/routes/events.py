from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from api.dependencies.fanout import FanoutContextDep
from api.dependencies.rate_limits import get_limiter
from core.config import settings
from core.logging import get_module_logger
from infrastructure.events import Event, dispatch_event, get_handlers_for_event

logger = get_module_logger()
router = APIRouter(tags=["Events"])
limiter = get_limiter()


class EventEnvelope(BaseModel):
    """Document-change envelope forwarded by the hosting platform."""

    event_id: Optional[str] = None
    actor_id: Optional[str] = None
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    params: Dict[str, Any] = Field(default_factory=dict)


@router.post("/events/{event_type}")
@limiter.limit(settings.server.EVENTS_RATE_LIMIT)
def ingest_event(
    event_type: str,
    envelope: EventEnvelope,
    request: Request,  # pylint: disable=unused-argument
    context: FanoutContextDep,  # pylint: disable=unused-argument
):
    """Run the triggers registered for ``event_type``.

    Args:
        event_type (str): Routing key, e.g. "order.created".
        envelope (EventEnvelope): Document states and path parameters.

    Raises:
        HTTPException: 404 if no trigger handles ``event_type``.
    Returns:
        dict: ``handled`` plus the trigger outcome, if any.
    """
    if not get_handlers_for_event(event_type):
        raise HTTPException(status_code=404, detail=f"Unknown event type: {event_type}")

    event = Event.from_dict({"event_type": event_type, **envelope.model_dump()})
    results = [r for r in dispatch_event(event) if r is not None]
    logger.info(
        "event_ingested",
        event_type=event_type,
        event_id=event.event_id,
        handled=bool(results),
    )
    return {
        "handled": bool(results),
        "result": results[0].to_response() if results else None,
    }
