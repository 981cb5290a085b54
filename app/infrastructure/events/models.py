"""Event models for the infrastructure event system.

An Event is the envelope of one document write delivered by the hosting
platform: which collection path changed, the document state before and
after the write, and the path parameters of the document.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4


@dataclass
class Event:
    """Immutable record of one document change.

    Attributes:
        event_type: Routing key (e.g. 'order.created', 'reservation.updated').
        event_id: Platform delivery id; identical on re-delivery.
        timestamp: When the change happened.
        correlation_id: Id tying together the logs of this invocation.
        actor_id: User whose action caused the write, when the platform knows it.
        before: Document data before the write (None on create).
        after: Document data after the write (None on delete).
        params: Path parameters, e.g. {"orderId": "o1"}.
    """

    event_type: str
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: UUID = field(default_factory=uuid4)
    actor_id: Optional[str] = None
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with ISO timestamp and string correlation id."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["correlation_id"] = str(self.correlation_id)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Deserialize an event envelope.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        try:
            timestamp = data.get("timestamp")
            if isinstance(timestamp, str):
                timestamp = datetime.fromisoformat(timestamp)
            elif timestamp is None:
                timestamp = datetime.now(timezone.utc)

            correlation_id = data.get("correlation_id")
            if isinstance(correlation_id, str):
                correlation_id = UUID(correlation_id)
            elif correlation_id is None:
                correlation_id = uuid4()

            return cls(
                event_type=data["event_type"],
                event_id=str(data.get("event_id") or uuid4()),
                timestamp=timestamp,
                correlation_id=correlation_id,
                actor_id=data.get("actor_id"),
                before=data.get("before"),
                after=data.get("after"),
                params=data.get("params") or {},
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ValueError(f"Invalid event data: {e}")

    def __hash__(self) -> int:
        return hash((self.event_id, self.correlation_id))
