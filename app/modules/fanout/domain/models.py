"""Fan-out data models.

- UserTokenProfile: the push-relevant slice of a user document
- RecipientGroup: recipients that receive the same rendered copy
- TriggerOutcome: what one trigger invocation delivered, per group
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from infrastructure.notifications import DispatchResult, union_tokens

BUSINESS_GROUP = "business"
CUSTOMER_GROUP = "customer"
RECIPIENTS_GROUP = "recipients"


@dataclass
class UserTokenProfile:
    """Registered push tokens and badge counter of one user.

    Attributes:
        user_id: Document id in ``users``
        primary_token: ``notificationToken`` field, if any
        device_tokens: ``devices[].token`` values, blanks removed
        badge_count: ``badgeCount`` field, never negative
    """

    user_id: str
    primary_token: Optional[str] = None
    device_tokens: List[str] = field(default_factory=list)
    badge_count: int = 0

    @classmethod
    def from_document(cls, user_id: str, data: Dict[str, Any]) -> "UserTokenProfile":
        primary = data.get("notificationToken")
        devices = data.get("devices")
        device_tokens = []
        if isinstance(devices, list):
            for device in devices:
                token = device.get("token") if isinstance(device, dict) else None
                if isinstance(token, str) and token:
                    device_tokens.append(token)
        badge = data.get("badgeCount")
        return cls(
            user_id=user_id,
            primary_token=primary if isinstance(primary, str) and primary else None,
            device_tokens=device_tokens,
            badge_count=badge if isinstance(badge, int) and badge > 0 else 0,
        )

    def all_tokens(self) -> List[str]:
        """Primary token first, then device tokens, each once."""
        return union_tokens(self.primary_token, self.device_tokens)


@dataclass
class RecipientGroup:
    """Recipients sharing one copy variant, in resolution order."""

    name: str
    user_ids: List[str] = field(default_factory=list)


class TriggerOutcome(BaseModel):
    """Result of one trigger invocation.

    Attributes:
        event_type: Routing key of the handled event
        event_id: Delivery id of the handled event
        recipients: Notified user ids per group
        groups: DispatchResult per group
        badge_committed: Whether the badge batch committed
    """

    event_type: str
    event_id: str
    recipients: Dict[str, List[str]] = Field(default_factory=dict)
    groups: Dict[str, DispatchResult] = Field(default_factory=dict)
    badge_committed: bool = True

    @property
    def total(self) -> DispatchResult:
        total = DispatchResult()
        for result in self.groups.values():
            total = total + result
        return total

    def to_response(self) -> Dict[str, Any]:
        """JSON-safe form returned by the API and stored by the idempotency cache."""
        data = self.model_dump(mode="json")
        data["total"] = self.total.model_dump()
        return data

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "TriggerOutcome":
        return cls.model_validate({k: v for k, v in data.items() if k != "total"})
