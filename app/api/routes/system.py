from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from core.config import settings
from infrastructure.events import get_registered_events

router = APIRouter(tags=["System"])
limiter = get_limiter()


# Load balancer health checks hit these frequently; keep the limit generous.
@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request):  # pylint: disable=unused-argument
    """Deployed git SHA."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(request: Request):  # pylint: disable=unused-argument
    """Liveness plus the event types with a registered trigger."""
    return {"status": "ok", "triggers": get_registered_events()}
