# pcforge/services/quotations.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlmodel import Session, select

from ..errors import NotFoundError, QuotationAlreadyDecided
from ..models.orders import Order, OrderItem
from ..models.vendors import (
    ComponentQuotation,
    VendorOrder,
    VendorProfile,
    VendorQuotation,
    VendorStats,
)
from .event_logger import log_event
from .order_status import OrderStatus, apply_transition, notify_transition
from .session import hub

logger = logging.getLogger(__name__)

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
QUOTATION_STATUSES = (PENDING, ACCEPTED, REJECTED)

ACCEPTED_ORDER_MESSAGE = "Component quotes have been accepted and components have been ordered."


# ---------- helpers ----------

def _get_vendor(session: Session, vendor_id: str) -> VendorProfile:
    vendor = session.get(VendorProfile, vendor_id)
    if not vendor:
        raise NotFoundError(f"Vendor {vendor_id} not found")
    return vendor


def _get_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError(f"Order {order_id} not found")
    return order


def _component_rows(session: Session, vendor_id: str, order_id: int) -> List[ComponentQuotation]:
    return session.exec(
        select(ComponentQuotation).where(
            ComponentQuotation.vendor_id == vendor_id,
            ComponentQuotation.order_id == order_id,
        )
    ).all()


def find_quotation(session: Session, vendor_id: str, order_id: int) -> Optional[VendorQuotation]:
    return session.exec(
        select(VendorQuotation).where(
            VendorQuotation.vendor_id == vendor_id,
            VendorQuotation.order_id == order_id,
        )
    ).first()


def _stats_row(session: Session, vendor_id: str) -> VendorStats:
    stats = session.get(VendorStats, vendor_id)
    if stats is None:
        stats = VendorStats(vendor_id=vendor_id)
        session.add(stats)
    return stats


def aggregate_price(session: Session, vendor_id: str, order_id: int) -> int:
    """Sum of unit price x quantity over the vendor's component quotes."""
    return sum(r.quoted_price * (r.quantity or 1) for r in _component_rows(session, vendor_id, order_id))


# ---------- vendor side ----------

def submit_component_quote(
    session: Session,
    vendor_id: str,
    order_id: int,
    order_item_id: int,
    unit_price: int,
    quantity: Optional[int] = None,
) -> VendorQuotation:
    """
    Record the vendor's price for one order line and refresh the
    (vendor, order) quotation total.

    Re-quoting the same line replaces the previous price. Quotes on a
    quotation that was already accepted or rejected are refused.
    """
    if unit_price is None or unit_price < 0:
        raise ValueError("unit_price must be non-negative")

    _get_vendor(session, vendor_id)
    _get_order(session, order_id)
    item = session.get(OrderItem, order_item_id)
    if not item or item.order_id != order_id:
        raise NotFoundError(f"Order item {order_item_id} not found on order {order_id}")

    quotation = find_quotation(session, vendor_id, order_id)
    if quotation and quotation.status != PENDING:
        raise QuotationAlreadyDecided(
            f"Quotation for order {order_id} by vendor {vendor_id} is already {quotation.status}"
        )

    now = datetime.utcnow()
    qty = quantity or item.quantity or 1
    try:
        row = session.exec(
            select(ComponentQuotation).where(
                ComponentQuotation.vendor_id == vendor_id,
                ComponentQuotation.order_item_id == order_item_id,
            )
        ).first()
        if row:
            row.quoted_price = unit_price
            row.quantity = qty
            row.updated_at = now
        else:
            row = ComponentQuotation(
                vendor_id=vendor_id,
                order_id=order_id,
                order_item_id=order_item_id,
                component_name=item.component_name,
                quoted_price=unit_price,
                quantity=qty,
                status=PENDING,
                updated_at=now,
            )
        session.add(row)
        session.flush()

        total = aggregate_price(session, vendor_id, order_id)
        if quotation is None:
            quotation = VendorQuotation(vendor_id=vendor_id, order_id=order_id, price=total)
        else:
            quotation.price = total
            quotation.updated_at = now
        session.add(quotation)

        log_event(
            session,
            "QUOTE_SUBMITTED",
            f"Vendor {vendor_id} quoted {unit_price} x {qty} for item {order_item_id} of order {order_id}",
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(quotation)
    return quotation


# ---------- admin side ----------

def record_decision(
    session: Session,
    vendor_id: str,
    order_id: int,
    accepted: bool,
) -> VendorQuotation:
    """
    Accept or reject the vendor's quotation for an order.

    In one transaction: synthesize the VendorQuotation from the component
    rows if none exists, set its status and every component row's status,
    bump orders_won / orders_lost, mark the VendorOrder, and on acceptance
    move a freshly received order to components_ordered.

    Repeating the decision already recorded changes nothing; reversing it
    raises QuotationAlreadyDecided.
    """
    new_status = ACCEPTED if accepted else REJECTED
    _get_vendor(session, vendor_id)
    order = _get_order(session, order_id)

    quotation = find_quotation(session, vendor_id, order_id)
    if quotation and quotation.status == new_status:
        logger.info("Quotation %s already %s; nothing to do", quotation.id, new_status)
        return quotation
    if quotation and quotation.status != PENDING:
        raise QuotationAlreadyDecided(
            f"Quotation {quotation.id} is {quotation.status} and cannot become {new_status}"
        )

    now = datetime.utcnow()
    status_update = None
    try:
        if quotation is None:
            quotation = VendorQuotation(
                vendor_id=vendor_id,
                order_id=order_id,
                price=aggregate_price(session, vendor_id, order_id),
            )
        quotation.status = new_status
        quotation.updated_at = now
        session.add(quotation)

        for row in _component_rows(session, vendor_id, order_id):
            row.status = new_status
            row.updated_at = now
            session.add(row)

        stats = _stats_row(session, vendor_id)
        if accepted:
            stats.orders_won += 1
        else:
            stats.orders_lost += 1
        stats.updated_at = now

        vendor_order = session.exec(
            select(VendorOrder).where(
                VendorOrder.vendor_id == vendor_id,
                VendorOrder.order_id == order_id,
            )
        ).first()
        if vendor_order is None:
            vendor_order = VendorOrder(vendor_id=vendor_id, order_id=order_id, status=new_status)
        vendor_order.status = new_status
        vendor_order.updated_at = now
        session.add(vendor_order)

        if accepted and order.status == OrderStatus.ORDER_RECEIVED.value:
            status_update = apply_transition(
                session, order, OrderStatus.COMPONENTS_ORDERED.value, ACCEPTED_ORDER_MESSAGE
            )

        log_event(
            session,
            "QUOTATION_DECIDED",
            f"Quotation of vendor {vendor_id} for order {order_id} {new_status} (price {quotation.price})",
            {"vendor_id": vendor_id, "order_id": order_id, "status": new_status},
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(quotation)
    if status_update is not None:
        session.refresh(order)
        notify_transition(order, status_update)
    hub.publish(
        "quotation.decided",
        {"vendor_id": vendor_id, "order_id": order_id, "status": new_status, "price": quotation.price},
    )
    _notify_vendor(session, vendor_id, order, quotation)
    return quotation


def _notify_vendor(session: Session, vendor_id: str, order: Order, quotation: VendorQuotation) -> None:
    from .notifications import send_quotation_decision

    vendor = session.get(VendorProfile, vendor_id)
    if not vendor or not vendor.email:
        return
    try:
        send_quotation_decision(vendor, order, quotation)
    except Exception:
        logger.exception("Quotation email to vendor %s failed", vendor_id)


# ---------- queries ----------

def vendor_stats(session: Session, vendor_id: str) -> VendorStats:
    _get_vendor(session, vendor_id)
    stats = session.get(VendorStats, vendor_id)
    if stats is None:
        stats = VendorStats(vendor_id=vendor_id)
        session.add(stats)
        session.commit()
        session.refresh(stats)
    return stats


def quotation_details(session: Session, quotation: VendorQuotation) -> Dict:
    rows = _component_rows(session, quotation.vendor_id, quotation.order_id)
    return {
        "id": quotation.id,
        "vendor_id": quotation.vendor_id,
        "order_id": quotation.order_id,
        "price": quotation.price,
        "status": quotation.status,
        "updated_at": quotation.updated_at.isoformat(),
        "components": [
            {
                "order_item_id": r.order_item_id,
                "component_name": r.component_name,
                "quoted_price": r.quoted_price,
                "quantity": r.quantity,
                "status": r.status,
            }
            for r in rows
        ],
    }


def list_quotations(
    session: Session,
    vendor_id: Optional[str] = None,
    status: Optional[str] = None,
) -> List[VendorQuotation]:
    query = select(VendorQuotation)
    if vendor_id:
        query = query.where(VendorQuotation.vendor_id == vendor_id)
    if status:
        query = query.where(VendorQuotation.status == status)
    return session.exec(query.order_by(VendorQuotation.updated_at.desc())).all()


def open_orders_for_vendor(session: Session, vendor_id: str) -> List[Order]:
    """Orders still waiting for components that this vendor has not been decided on."""
    decided = session.exec(
        select(VendorOrder.order_id).where(VendorOrder.vendor_id == vendor_id)
    ).all()
    query = select(Order).where(Order.status == OrderStatus.ORDER_RECEIVED.value)
    if decided:
        query = query.where(Order.id.not_in(decided))
    return session.exec(query.order_by(Order.order_date.desc())).all()
