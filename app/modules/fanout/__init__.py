"""Push notification fan-out.

Resolves recipients for chat, order and reservation events, increments their
badge counters in one batch and sends the rendered notification through FCM
and Expo.

Usage:
    from modules.fanout import FanoutTriggers, build_context, register_triggers

    triggers = FanoutTriggers(build_context())
    register_triggers(triggers)
"""

from modules.fanout.badges import BadgeBatch, BadgeCounterStore
from modules.fanout.callables import reset_badge
from modules.fanout.context import FanoutContext, build_context
from modules.fanout.pipeline import FanoutPipeline
from modules.fanout.profiles import ProfileRepository
from modules.fanout.recipients import RecipientResolver
from modules.fanout.triggers import FanoutTriggers, register_triggers

__all__ = [
    "BadgeBatch",
    "BadgeCounterStore",
    "FanoutContext",
    "FanoutPipeline",
    "FanoutTriggers",
    "ProfileRepository",
    "RecipientResolver",
    "build_context",
    "register_triggers",
    "reset_badge",
]
