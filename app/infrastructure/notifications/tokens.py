"""Device token classification.

Partitions a user's registered push tokens into the FCM bucket and the Expo
bucket by a literal prefix test, de-duplicating within each bucket.
"""

import re
from typing import Iterable, List, Optional

from infrastructure.notifications.models import ClassifiedTokens, unique_tokens

EXPO_TOKEN_PREFIXES = ("ExponentPushToken[", "ExpoPushToken[")

_EXPO_UUID_TOKEN = re.compile(
    r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$", re.IGNORECASE
)


def is_expo_style(token: str) -> bool:
    """Bucket rule: Expo iff the token starts with an Expo prefix."""
    return token.startswith(EXPO_TOKEN_PREFIXES)


def is_expo_push_token(token: object) -> bool:
    """Expo's token format contract.

    ``ExponentPushToken[...]`` / ``ExpoPushToken[...]`` with a closing
    bracket, or a bare UUID device id.
    """
    if not isinstance(token, str):
        return False
    if is_expo_style(token) and token.endswith("]"):
        return True
    return bool(_EXPO_UUID_TOKEN.match(token))


def union_tokens(
    primary_token: Optional[str], device_tokens: Iterable[Optional[str]] = ()
) -> List[str]:
    """Primary token first, then device tokens, without repeats or blanks."""
    candidates = [primary_token, *device_tokens]
    return unique_tokens(t for t in candidates if isinstance(t, str) and t.strip())


def classify(
    tokens: Iterable[Optional[str]], exclude: Iterable[Optional[str]] = ()
) -> ClassifiedTokens:
    """Partition tokens into FCM and Expo buckets.

    Args:
        tokens: Raw tokens; non-strings and blanks are ignored.
        exclude: Tokens removed from both buckets after classification
            (the acting user's own tokens).

    Returns:
        ClassifiedTokens with unique, disjoint buckets
    """
    fcm: List[str] = []
    expo: List[str] = []
    for token in tokens:
        if not isinstance(token, str) or not token.strip():
            continue
        (expo if is_expo_style(token) else fcm).append(token)
    classified = ClassifiedTokens(fcm=unique_tokens(fcm), expo=unique_tokens(expo))
    return classified.exclude(exclude)
