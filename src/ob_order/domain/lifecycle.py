"""Order lifecycle guard.

    PENDING  → APPROVED | CANCELLED
    APPROVED → DELIVERED | CANCELLED
    DELIVERED, CANCELLED: terminal

Items, discount and delivery details may change only while PENDING. The
delivery sub-status is independent and may move at any order status.
"""
from datetime import datetime

from src.ob_common.enums import DeliveryStatus, OrderStatus
from src.ob_common.errors import InvalidStatusTransitionError, OrderNotPendingError
from src.ob_order.domain.models import DeliveryInfo, Order

ORDER_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING.value: frozenset(
        {OrderStatus.APPROVED.value, OrderStatus.CANCELLED.value}
    ),
    OrderStatus.APPROVED.value: frozenset(
        {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}
    ),
    OrderStatus.DELIVERED.value: frozenset(),
    OrderStatus.CANCELLED.value: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ORDER_TRANSITIONS.get(current, frozenset())


def transition(order: Order, target: str) -> None:
    """Move order to target status or raise InvalidStatusTransitionError."""
    if not can_transition(order.status, target):
        raise InvalidStatusTransitionError(order.status, target)
    order.status = OrderStatus(target).value


def ensure_mutable(order: Order) -> None:
    """Reject item/discount/delivery changes outside PENDING."""
    if not order.is_mutable:
        raise OrderNotPendingError(order.id, order.status)


def apply_delivery_status(delivery: DeliveryInfo, status: str, now: datetime) -> None:
    """Set the delivery sub-status; DELIVERED stamps delivered_at once."""
    delivery.status = DeliveryStatus(status).value
    if delivery.status == DeliveryStatus.DELIVERED and delivery.delivered_at is None:
        delivery.delivered_at = now
