from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from api.dependencies.fanout import FanoutContextDep
from api.dependencies.rate_limits import get_limiter
from core.config import settings
from core.logging import get_module_logger
from infrastructure.auth import CallerIdentity
from infrastructure.auth.security import get_caller_identity
from modules.fanout import reset_badge
from modules.fanout.domain import InternalError, Unauthenticated

logger = get_module_logger()
router = APIRouter(tags=["Badges"])
limiter = get_limiter()


@router.post("/badge/reset")
@limiter.limit(settings.server.BADGE_RATE_LIMIT)
def reset_badge_count(
    request: Request,  # pylint: disable=unused-argument
    context: FanoutContextDep,
    caller: Optional[CallerIdentity] = Depends(get_caller_identity),
):
    """Reset the calling user's notification badge counter to 0.

    Raises:
        HTTPException: 401 without a valid Firebase ID token, 500 if the
            counter could not be written.
    Returns:
        dict: ``{"success": True}``
    """
    try:
        return reset_badge(context, caller)
    except Unauthenticated as e:
        raise HTTPException(status_code=401, detail=e.message) from e
    except InternalError as e:
        raise HTTPException(status_code=500, detail=e.message) from e
