"""Notification copy (es-MX).

Renders title, body, data payload and Android channel for each event type.
The data payload keys are what the mobile app reads when a notification is
opened.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from modules.fanout.domain import (
    ChatMessageEvent,
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    ReservationCreatedEvent,
    ReservationStatusChangedEvent,
)

CHAT_CHANNEL = "chat-messages"
ORDERS_CHANNEL = "orders"
RESERVATIONS_CHANNEL = "reservations"

DEFAULT_SENDER_NAME = "Usuario"
DEFAULT_CUSTOMER_NAME = "Cliente"
DEFAULT_BUSINESS_NAME = "el negocio"
MAX_CHAT_BODY = 100

ORDER_STATUS_TITLE = "Estado del Pedido Actualizado"
ORDER_STATUS_COPY = {
    "paid": (None, "ha sido pagado con éxito."),
    "preparing": (None, "está siendo preparado."),
    "in_transit": (None, "está en camino."),
    "delivered": ("¡Pedido Entregado!", "ha sido entregado con éxito."),
    "canceled": ("Pedido Cancelado", "ha sido cancelado."),
    "refunded": ("Pedido Reembolsado", "ha sido reembolsado."),
}

RESERVATION_STATUS_COPY = {
    "confirmed": ("Reservación Confirmada", "Tu reservación en {business}{when} ha sido confirmada."),
    "completed": ("Reservación Completada", "¡Gracias por tu visita! Tu reservación en {business} ha sido completada."),
    "canceled": ("Reservación Cancelada", "Tu reservación en {business}{when} ha sido cancelada."),
    "pending": ("Reservación Pendiente", "Tu reservación en {business}{when} está pendiente de confirmación."),
}
RESERVATION_STATUS_TITLE = "Estado de Reservación Actualizado"


@dataclass
class RenderedCopy:
    """Rendered notification for one recipient group.

    Attributes:
        title: Alert title
        body: Alert body
        notification_type: Inbox record type ("chat", "order_new", ...)
        data: Push data payload
        channel_id: Android notification channel
    """

    title: str
    body: str
    notification_type: str
    data: Dict[str, str] = field(default_factory=dict)
    channel_id: Optional[str] = None


def truncate(text: str, limit: int = MAX_CHAT_BODY) -> str:
    """``text`` cut to ``limit - 3`` chars plus "..." when longer than ``limit``."""
    if len(text) > limit:
        return f"{text[: limit - 3]}..."
    return text


def format_currency(amount: float) -> str:
    """MXN amount as shown in es-MX ("$1,234.50")."""
    return f"${amount:,.2f}"


def summarize_items(items: List[dict]) -> str:
    """First item name plus how many more; empty for no items."""
    if not items:
        return ""
    first = items[0].get("name") or items[0].get("productName") or "producto"
    if len(items) == 1:
        return str(first)
    return f"{first} y {len(items) - 1} producto(s) más"


def _schedule(date: Optional[str], time: Optional[str]) -> str:
    parts = []
    if date:
        parts.append(f" el {date}")
    if time:
        parts.append(f" a las {time}")
    return "".join(parts)


def render_chat(event: ChatMessageEvent) -> RenderedCopy:
    sender_name = event.sender_name or DEFAULT_SENDER_NAME
    if event.message_type == "image":
        body = f"{sender_name} te ha enviado una imagen"
    else:
        body = truncate(event.text)
    return RenderedCopy(
        title=sender_name,
        body=body,
        notification_type="chat",
        data={
            "type": "chat",
            "conversationId": event.conversation_id,
            "messageId": event.message_id,
            "senderId": event.sender_id,
            "senderName": sender_name,
        },
        channel_id=CHAT_CHANNEL,
    )


def order_number_for(order_id: str, order_number: Optional[str]) -> str:
    return order_number or f"#{order_id[:6]}"


def render_order_created(event: OrderCreatedEvent) -> RenderedCopy:
    order_number = order_number_for(event.order_id, event.order_number)
    total = format_currency(event.total)
    body = f"Pedido #{order_number.lstrip('#')} - {total}"
    items = summarize_items(event.items)
    if items:
        body += f" | {items}"
    body += f" | De: {event.customer_name or DEFAULT_CUSTOMER_NAME}"
    return RenderedCopy(
        title="¡Nuevo Pedido! 💰",
        body=body,
        notification_type="order_new",
        data={
            "type": "order_new",
            "orderId": event.order_id,
            "businessId": event.business_id,
            "orderNumber": order_number,
            "total": str(event.total),
        },
        channel_id=ORDERS_CHANNEL,
    )


def render_order_status(event: OrderStatusChangedEvent) -> RenderedCopy:
    status = event.new_status
    title, phrase = ORDER_STATUS_COPY.get(
        status, (None, f"ahora está en estado: {status}.")
    )
    return RenderedCopy(
        title=title or ORDER_STATUS_TITLE,
        body=f"Tu pedido {event.order_number or event.order_id} {phrase}",
        notification_type="order_status",
        data={
            "type": "order_status",
            "orderId": event.order_id,
            "businessId": event.business_id,
            "orderNumber": event.order_number or event.order_id,
            "status": status,
        },
        channel_id=ORDERS_CHANNEL,
    )


def _reservation_data(event, notification_type: str, status: Optional[str]) -> Dict[str, str]:
    return {
        "type": notification_type,
        "reservationId": event.reservation_id,
        "businessId": event.business_id,
        "status": status,
    }


def render_reservation_for_business(event: ReservationCreatedEvent) -> RenderedCopy:
    body = f"{event.customer_name or DEFAULT_CUSTOMER_NAME} reservó"
    if event.party_size:
        body += f" para {event.party_size} persona(s)"
    body += _schedule(event.date, event.time)
    if event.notes:
        body += f" | Nota: {truncate(event.notes, 60)}"
    return RenderedCopy(
        title="Nueva Reservación",
        body=body,
        notification_type="reservation_new",
        data=_reservation_data(event, "reservation_new", "pending"),
        channel_id=RESERVATIONS_CHANNEL,
    )


def render_reservation_for_customer(event: ReservationCreatedEvent) -> RenderedCopy:
    business = event.business_name or DEFAULT_BUSINESS_NAME
    return RenderedCopy(
        title="Reservación Recibida",
        body=(
            f"Tu reservación en {business}{_schedule(event.date, event.time)} "
            "fue recibida y está pendiente de confirmación."
        ),
        notification_type="reservation_new",
        data=_reservation_data(event, "reservation_new", "pending"),
        channel_id=RESERVATIONS_CHANNEL,
    )


def render_reservation_status(event: ReservationStatusChangedEvent) -> RenderedCopy:
    status = event.new_status
    business = event.business_name or DEFAULT_BUSINESS_NAME
    if status in RESERVATION_STATUS_COPY:
        title, template = RESERVATION_STATUS_COPY[status]
        body = template.format(business=business, when=_schedule(event.date, event.time))
    else:
        title = RESERVATION_STATUS_TITLE
        body = f"Tu reservación en {business} ahora está en estado: {status}."
    return RenderedCopy(
        title=title,
        body=body,
        notification_type="reservation_status",
        data=_reservation_data(event, "reservation_status", status),
        channel_id=RESERVATIONS_CHANNEL,
    )


def render_reservation_canceled_by_customer(
    event: ReservationStatusChangedEvent,
) -> RenderedCopy:
    when = _schedule(event.date, event.time)
    return RenderedCopy(
        title="Reservación Cancelada por el Cliente",
        body=f"La reservación{when} fue cancelada por el cliente.",
        notification_type="reservation_status",
        data=_reservation_data(event, "reservation_status", event.new_status),
        channel_id=RESERVATIONS_CHANNEL,
    )
