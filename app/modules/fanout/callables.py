"""Client-callable operations."""

from typing import Optional

from infrastructure.auth import CallerIdentity
from modules.fanout.badges import BadgeCounterStore
from modules.fanout.context import FanoutContext


def reset_badge(context: FanoutContext, caller: Optional[CallerIdentity]) -> dict:
    """Reset the caller's badge counter to 0.

    Raises:
        Unauthenticated: No verified caller identity.
        InternalError: The counter could not be written.
    """
    badges = BadgeCounterStore(
        context.store, default_badge=context.settings.fanout.DEFAULT_BADGE
    )
    return badges.reset_badge(caller)
