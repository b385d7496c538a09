# pcforge/services/order_status.py
"""
Order status machine.

Statuses move forward along STATUS_SEQUENCE (skipping ahead is allowed) or
jump to ``cancelled`` from any non-terminal state. ``delivered`` and
``cancelled`` are terminal: the order no longer changes.

Every transition appends an OrderUpdate and refreshes Order.status in the
same transaction, so the history and the current status cannot disagree.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlmodel import Session, select

from ..errors import InvalidTransitionError, NotFoundError, TerminalOrderError
from ..models.orders import Order, OrderUpdate
from .event_logger import log_event
from .session import hub

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    ORDER_RECEIVED = "order_received"
    COMPONENTS_ORDERED = "components_ordered"
    COMPONENTS_RECEIVED = "components_received"
    PC_BUILDING = "pc_building"
    PC_TESTING = "pc_testing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


STATUS_SEQUENCE: List[OrderStatus] = [
    OrderStatus.ORDER_RECEIVED,
    OrderStatus.COMPONENTS_ORDERED,
    OrderStatus.COMPONENTS_RECEIVED,
    OrderStatus.PC_BUILDING,
    OrderStatus.PC_TESTING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

STATUS_LABELS = {
    OrderStatus.ORDER_RECEIVED: "Order Received",
    OrderStatus.COMPONENTS_ORDERED: "Components Ordered",
    OrderStatus.COMPONENTS_RECEIVED: "Components Received",
    OrderStatus.PC_BUILDING: "PC Building",
    OrderStatus.PC_TESTING: "PC Testing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

DEFAULT_MESSAGES = {
    OrderStatus.ORDER_RECEIVED: "Your order has been received and is being processed.",
    OrderStatus.COMPONENTS_ORDERED: "Components for your build have been ordered from our suppliers.",
    OrderStatus.COMPONENTS_RECEIVED: "All components for your build have arrived at our workshop.",
    OrderStatus.PC_BUILDING: "Your PC build is now in progress by our expert technicians.",
    OrderStatus.PC_TESTING: "Your PC is undergoing our rigorous testing process to ensure everything works perfectly.",
    OrderStatus.SHIPPED: "Your PC has been shipped and is on its way to you.",
    OrderStatus.DELIVERED: "Your PC has been delivered. Enjoy your new build!",
    OrderStatus.CANCELLED: "Your order has been cancelled.",
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidTransitionError(f"Unknown order status: {value}") from None


def is_terminal(status: str) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def next_status(status: str) -> OrderStatus:
    current = parse_status(status)
    if current in TERMINAL_STATUSES:
        raise TerminalOrderError(f"Cannot advance terminal order (status {current.value})")
    return STATUS_SEQUENCE[STATUS_SEQUENCE.index(current) + 1]


def can_transition(current: str, target: str) -> bool:
    cur = parse_status(current)
    tgt = parse_status(target)
    if cur in TERMINAL_STATUSES:
        return False
    if tgt == OrderStatus.CANCELLED:
        return True
    return STATUS_SEQUENCE.index(tgt) > STATUS_SEQUENCE.index(cur)


def default_message(status: str) -> str:
    return DEFAULT_MESSAGES[parse_status(status)]


# ---------- persistence ----------

def get_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError(f"Order {order_id} not found")
    return order


def apply_transition(
    session: Session,
    order: Order,
    target: str,
    message: Optional[str] = None,
) -> OrderUpdate:
    """
    Stage a transition on ``session`` without committing.

    Used by callers that bundle the transition with other writes
    (quotation acceptance); everyone else goes through transition_order.
    """
    tgt = parse_status(target)
    if is_terminal(order.status):
        raise TerminalOrderError(
            f"Order {order.id} is {order.status} and can no longer change"
        )
    if not can_transition(order.status, tgt.value):
        raise InvalidTransitionError(
            f"Order {order.id} cannot move from {order.status} to {tgt.value}"
        )

    now = datetime.utcnow()
    update = OrderUpdate(
        order_id=order.id,
        status=tgt.value,
        message=(message or "").strip() or DEFAULT_MESSAGES[tgt],
        update_date=now,
    )
    previous = order.status
    order.status = tgt.value
    order.updated_at = now
    session.add(update)
    session.add(order)

    log_event(
        session,
        "ORDER_STATUS_CHANGED",
        f"Order {order.tracking_id}: {previous} -> {tgt.value}",
        {"order_id": order.id, "from": previous, "to": tgt.value},
    )
    return update


def transition_order(
    session: Session,
    order: Order,
    target: str,
    message: Optional[str] = None,
    notify: bool = True,
) -> OrderUpdate:
    try:
        update = apply_transition(session, order, target, message)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(update)
    session.refresh(order)

    if notify:
        notify_transition(order, update)
    return update


def advance_order(session: Session, order: Order, message: Optional[str] = None, notify: bool = True) -> OrderUpdate:
    return transition_order(session, order, next_status(order.status).value, message, notify)


def cancel_order(session: Session, order: Order, message: Optional[str] = None, notify: bool = True) -> OrderUpdate:
    return transition_order(session, order, OrderStatus.CANCELLED.value, message, notify)


def record_initial_status(session: Session, order: Order) -> OrderUpdate:
    """First history row for a freshly created order (no commit)."""
    update = OrderUpdate(
        order_id=order.id,
        status=OrderStatus.ORDER_RECEIVED.value,
        message=DEFAULT_MESSAGES[OrderStatus.ORDER_RECEIVED],
        update_date=order.order_date,
    )
    session.add(update)
    return update


def order_history(session: Session, order_id: int) -> List[OrderUpdate]:
    return session.exec(
        select(OrderUpdate)
        .where(OrderUpdate.order_id == order_id)
        .order_by(OrderUpdate.update_date, OrderUpdate.id)
    ).all()


def notify_transition(order: Order, update: OrderUpdate) -> None:
    """Post-commit side effects; failures are logged, never raised."""
    from .notifications import send_status_update

    hub.publish(
        "order.status_changed",
        {"order_id": order.id, "tracking_id": order.tracking_id, "status": update.status},
    )
    try:
        send_status_update(order, update)
    except Exception:
        logger.exception("Status email for order %s failed", order.id)
