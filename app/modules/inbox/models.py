"""Inbox data models.

NotificationRecord mirrors one ``user_notifications`` document; BannerPayload
is what the UI collaborator renders for it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Literal, Optional, get_args

from pydantic import BaseModel, Field, field_validator

from infrastructure.persistence import Document

NotificationType = Literal[
    "chat",
    "order_new",
    "order_status",
    "reservation_new",
    "reservation_status",
    "system",
    "promo",
]

DEFAULT_TITLE = "Nueva notificación"
DEFAULT_TYPE = "system"
_KNOWN_TYPES = set(get_args(NotificationType))


class NotificationRecord(BaseModel):
    """One record of the per-user notification feed."""

    id: str
    title: str = DEFAULT_TITLE
    message: str = ""
    type: NotificationType = DEFAULT_TYPE
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    read: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Any) -> Any:
        return v or DEFAULT_TITLE

    @field_validator("message", mode="before")
    @classmethod
    def default_message(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("type", mode="before")
    @classmethod
    def known_type(cls, v: Any) -> Any:
        return v if v in _KNOWN_TYPES else DEFAULT_TYPE

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @classmethod
    def from_document(cls, document: Document) -> "NotificationRecord":
        data = document.data
        created_at = data.get("createdAt")
        return cls(
            id=document.id,
            title=data.get("title"),
            message=data.get("message"),
            type=data.get("type"),
            data=data.get("data"),
            created_at=created_at if isinstance(created_at, datetime) else None,
            read=bool(data.get("read", False)),
        )


@dataclass(frozen=True)
class BannerRoute:
    """Screen (and its params) the app opens when a banner is tapped."""

    screen: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BannerPayload:
    """In-app banner shown for one record.

    Attributes:
        id: Record id; banners pushed by app code may carry their own
        title: Banner title
        message: Banner text
        type: Notification type, drives icon and tap navigation
        data: Navigation data
        auto_dismiss: Dismiss after ``duration`` ms
        duration: Auto-dismiss delay in ms
    """

    id: str
    title: str
    message: str
    type: str = DEFAULT_TYPE
    data: Dict[str, Any] = field(default_factory=dict)
    auto_dismiss: bool = True
    duration: int = 5000

    @classmethod
    def from_record(cls, record: NotificationRecord, duration: int = 5000) -> "BannerPayload":
        return cls(
            id=record.id,
            title=record.title,
            message=record.message,
            type=record.type,
            data=dict(record.data),
            duration=duration,
        )

    def route(self) -> Optional[BannerRoute]:
        """Navigation target on tap; None when the data lacks the needed id."""
        data = self.data
        if self.type == "chat" and data.get("conversationId"):
            return BannerRoute("Chat", {"conversationId": data["conversationId"]})
        if self.type in ("order_new", "order_status") and data.get("orderId"):
            return BannerRoute("OrderDetails", {"orderId": data["orderId"]})
        if self.type in ("reservation_new", "reservation_status") and data.get("reservationId"):
            return BannerRoute("ReservationDetail", {"reservationId": data["reservationId"]})
        if self.type == "promo" and data.get("businessId"):
            return BannerRoute("BusinessDetail", {"businessId": data["businessId"]})
        if self.type == "system" and data.get("screen"):
            return BannerRoute(str(data["screen"]))
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "data": self.data,
            "autoDismiss": self.auto_dismiss,
            "duration": self.duration,
        }
