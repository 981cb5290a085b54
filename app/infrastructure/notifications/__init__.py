"""Push notification infrastructure.

Token classification, the FCM and Expo channels and the dispatcher that
sends one payload through both.

Usage:
    from infrastructure.notifications import (
        PushDispatcher,
        PushPayload,
        classify,
        union_tokens,
    )

    tokens = classify(union_tokens(profile.primary_token, profile.device_tokens))
    result = dispatcher.dispatch(tokens, PushPayload(title="Hola", body="..."))
"""

from infrastructure.notifications.channels import ExpoChannel, FcmChannel, PushChannel
from infrastructure.notifications.dispatcher import PushDispatcher
from infrastructure.notifications.models import (
    ChannelResult,
    ClassifiedTokens,
    DispatchResult,
    PushPayload,
)
from infrastructure.notifications.tokens import (
    EXPO_TOKEN_PREFIXES,
    classify,
    is_expo_push_token,
    is_expo_style,
    union_tokens,
)

__all__ = [
    "PushDispatcher",
    "PushChannel",
    "FcmChannel",
    "ExpoChannel",
    "PushPayload",
    "ClassifiedTokens",
    "ChannelResult",
    "DispatchResult",
    "EXPO_TOKEN_PREFIXES",
    "classify",
    "is_expo_push_token",
    "is_expo_style",
    "union_tokens",
]
