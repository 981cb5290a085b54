"""Push notification core models.

Channel-agnostic payload and result models shared by the token classifier,
the push channels and the dispatcher.
"""

from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def unique_tokens(tokens: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for token in tokens:
        if token not in seen:
            seen.add(token)
            ordered.append(token)
    return ordered


class PushPayload(BaseModel):
    """Rendered notification sent to every token of one dispatch.

    Attributes:
        title: Alert title
        body: Alert body
        data: String map delivered to the app alongside the alert
        badge: App icon badge number
        sound: Sound name ("default")
        priority: Delivery priority
        channel_id: Android notification channel ("chat-messages", "orders", ...)

    Example:
        payload = PushPayload(
            title="¡Nuevo Pedido! 💰",
            body="Pedido #A1 - $120.00",
            data={"type": "order_new", "orderId": "o1"},
            badge=3,
            channel_id="orders",
        )
    """

    title: str = ""
    body: str = ""
    data: Dict[str, str] = Field(default_factory=dict)
    badge: int = Field(default=1, ge=0)
    sound: str = "default"
    priority: Literal["default", "normal", "high"] = "high"
    channel_id: Optional[str] = None

    @field_validator("data", mode="before")
    @classmethod
    def stringify_data(cls, v: Any) -> Dict[str, str]:
        """FCM data maps only carry strings; None values are dropped."""
        if v is None:
            return {}
        return {str(k): str(val) for k, val in dict(v).items() if val is not None}

    @model_validator(mode="after")
    def require_content(self) -> "PushPayload":
        """A payload needs a title or a body."""
        if not self.title.strip() and not self.body.strip():
            raise ValueError("Push payload needs a title or a body")
        return self


class ClassifiedTokens(BaseModel):
    """Tokens partitioned by delivery channel.

    ``fcm`` holds native FCM registration tokens (channel A), ``expo`` holds
    Expo push tokens (channel B). Each list is unique; the two are disjoint
    because membership comes from a prefix test.
    """

    fcm: List[str] = Field(default_factory=list)
    expo: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.fcm and not self.expo

    @property
    def total(self) -> int:
        return len(self.fcm) + len(self.expo)

    def merge(self, other: "ClassifiedTokens") -> "ClassifiedTokens":
        """Union of both bucket sets, first-seen order kept."""
        return ClassifiedTokens(
            fcm=unique_tokens([*self.fcm, *other.fcm]),
            expo=unique_tokens([*self.expo, *other.expo]),
        )

    def exclude(self, tokens: Iterable[Optional[str]]) -> "ClassifiedTokens":
        """Drop ``tokens`` from both buckets."""
        blocked = {t for t in tokens if t}
        if not blocked:
            return self
        return ClassifiedTokens(
            fcm=[t for t in self.fcm if t not in blocked],
            expo=[t for t in self.expo if t not in blocked],
        )


class ChannelResult(BaseModel):
    """Sent/failed tallies reported by one channel send."""

    sent: int = 0
    failed: int = 0

    def __add__(self, other: "ChannelResult") -> "ChannelResult":
        return ChannelResult(sent=self.sent + other.sent, failed=self.failed + other.failed)


class DispatchResult(BaseModel):
    """Per-channel delivery tallies of one trigger dispatch.

    Attributes:
        fcm_sent: FCM tokens accepted (channel A)
        fcm_failed: FCM tokens rejected (channel A)
        expo_sent: Expo tickets with status "ok" (channel B)
        expo_failed: Expo tickets in error, invalid chunks included (channel B)
    """

    fcm_sent: int = 0
    fcm_failed: int = 0
    expo_sent: int = 0
    expo_failed: int = 0

    def __add__(self, other: "DispatchResult") -> "DispatchResult":
        return DispatchResult(
            fcm_sent=self.fcm_sent + other.fcm_sent,
            fcm_failed=self.fcm_failed + other.fcm_failed,
            expo_sent=self.expo_sent + other.expo_sent,
            expo_failed=self.expo_failed + other.expo_failed,
        )

    @property
    def sent(self) -> int:
        return self.fcm_sent + self.expo_sent

    @property
    def failed(self) -> int:
        return self.fcm_failed + self.expo_failed
