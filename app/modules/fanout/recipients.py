"""Recipient resolution.

Computes who must be notified for a domain event, grouped by the copy
variant they receive. Every group is ordered, free of duplicates and never
contains the acting user, except the customer group of a reservation
status change. A failed auxiliary lookup (business document,
permission query) removes that branch only.
"""

from typing import Iterable, List, Optional

from core.logging import get_module_logger
from infrastructure.operations import OperationStatus
from infrastructure.persistence import DocumentStore
from modules.fanout.domain import (
    BUSINESS_GROUP,
    CUSTOMER_GROUP,
    RECIPIENTS_GROUP,
    ChatMessageEvent,
    DomainEvent,
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    RecipientGroup,
    ReservationCreatedEvent,
    ReservationStatusChangedEvent,
)

logger = get_module_logger()

PRIVILEGED_ROLES = ["owner", "admin", "manager"]
OWNER_ALERT_ORDER_STATUSES = frozenset({"canceled", "refunded"})

CONVERSATIONS = "conversations"
BUSINESSES = "businesses"
BUSINESS_PERMISSIONS = "business_permissions"


def normalize_id(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def unique_recipients(
    candidates: Iterable[object], exclude: Iterable[object] = ()
) -> List[str]:
    """String-normalised, de-duplicated candidates minus ``exclude``."""
    blocked = {normalize_id(e) for e in exclude} - {None}
    seen = set()
    ordered = []
    for candidate in candidates:
        user_id = normalize_id(candidate)
        if user_id is None or user_id in blocked or user_id in seen:
            continue
        seen.add(user_id)
        ordered.append(user_id)
    return ordered


class RecipientResolver:
    """Resolves recipient groups through the injected document store.

    Args:
        store: Document store holding conversations, businesses and permissions
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    def resolve(self, event: DomainEvent) -> List[str]:
        """Every recipient of ``event`` across groups, first-seen order."""
        return unique_recipients(
            user_id for group in self.resolve_groups(event) for user_id in group.user_ids
        )

    def resolve_groups(self, event: DomainEvent) -> List[RecipientGroup]:
        """Recipient groups of ``event``; empty groups are omitted."""
        if isinstance(event, ChatMessageEvent):
            groups = [self._chat(event)]
        elif isinstance(event, OrderCreatedEvent):
            groups = [self._order_created(event)]
        elif isinstance(event, OrderStatusChangedEvent):
            groups = [self._order_status(event)] if event.status_changed else []
        elif isinstance(event, ReservationCreatedEvent):
            groups = self._reservation_created(event)
        elif isinstance(event, ReservationStatusChangedEvent):
            groups = self._reservation_status(event) if event.status_changed else []
        else:
            raise TypeError(f"Unsupported event: {type(event).__name__}")
        return [group for group in groups if group.user_ids]

    # Event rules

    def _chat(self, event: ChatMessageEvent) -> RecipientGroup:
        result = self._store.get(CONVERSATIONS, event.conversation_id)
        if not result.is_success:
            self._log_lookup_failure(result, "conversation", event.conversation_id)
            return RecipientGroup(RECIPIENTS_GROUP)
        participants = result.data.get("participants") or []
        if not isinstance(participants, list):
            participants = []
        return RecipientGroup(
            RECIPIENTS_GROUP,
            unique_recipients(participants, exclude=[event.sender_id, event.actor_id]),
        )

    def _order_created(self, event: OrderCreatedEvent) -> RecipientGroup:
        staff = self._business_staff(event.business_id)
        return RecipientGroup(
            BUSINESS_GROUP, unique_recipients(staff, exclude=[event.actor_id])
        )

    def _order_status(self, event: OrderStatusChangedEvent) -> RecipientGroup:
        candidates = [event.customer_id]
        if event.new_status in OWNER_ALERT_ORDER_STATUSES and event.business_id:
            candidates.append(self._business_owner(event.business_id))
        return RecipientGroup(
            RECIPIENTS_GROUP, unique_recipients(candidates, exclude=[event.actor_id])
        )

    def _reservation_created(self, event: ReservationCreatedEvent) -> List[RecipientGroup]:
        return [
            RecipientGroup(
                BUSINESS_GROUP,
                unique_recipients(
                    self._business_staff(event.business_id), exclude=[event.actor_id]
                ),
            ),
            RecipientGroup(
                CUSTOMER_GROUP,
                unique_recipients([event.customer_id], exclude=[event.actor_id]),
            ),
        ]

    def _reservation_status(
        self, event: ReservationStatusChangedEvent
    ) -> List[RecipientGroup]:
        # The customer always hears about their reservation, even when they acted.
        groups = [RecipientGroup(CUSTOMER_GROUP, unique_recipients([event.customer_id]))]
        if event.canceled_by_customer:
            groups.append(
                RecipientGroup(
                    BUSINESS_GROUP,
                    unique_recipients(
                        self._business_staff(event.business_id),
                        exclude=[event.actor_id, event.customer_id],
                    ),
                )
            )
        return groups

    # Lookups

    def _business_owner(self, business_id: str) -> Optional[str]:
        result = self._store.get(BUSINESSES, business_id)
        if not result.is_success:
            self._log_lookup_failure(result, "business", business_id)
            return None
        owner_id = result.data.get("ownerId")
        return owner_id if isinstance(owner_id, str) and owner_id else None

    def _business_staff(self, business_id: str) -> List[str]:
        """Owner first, then holders of a privileged permission."""
        staff = [self._business_owner(business_id)]
        result = self._store.query(
            BUSINESS_PERMISSIONS,
            filters=[
                ("businessId", "==", business_id),
                ("role", "in", PRIVILEGED_ROLES),
            ],
        )
        if not result.is_success:
            self._log_lookup_failure(result, "business_permissions", business_id)
        else:
            staff.extend(doc.data.get("userId") for doc in result.data)
        logger.debug(
            "business_staff_resolved",
            business_id=business_id,
            staff_count=len([s for s in staff if s]),
        )
        return [s for s in staff if s]

    @staticmethod
    def _log_lookup_failure(result, kind: str, doc_id: str) -> None:
        if result.status == OperationStatus.NOT_FOUND:
            logger.info("recipient_lookup_missing", kind=kind, doc_id=doc_id)
        else:
            logger.warning(
                "recipient_lookup_failed",
                kind=kind,
                doc_id=doc_id,
                status=result.status.value,
                error=result.message,
            )
