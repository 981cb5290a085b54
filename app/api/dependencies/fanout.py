"""Fan-out context dependency.

The context is built once by the application lifespan and kept on
``app.state.fanout``.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from modules.fanout import FanoutContext


def get_fanout_context(request: Request) -> FanoutContext:
    context = getattr(request.app.state, "fanout", None)
    if context is None:
        raise HTTPException(status_code=503, detail="Fan-out service not initialized")
    return context


FanoutContextDep = Annotated[FanoutContext, Depends(get_fanout_context)]
