# pcforge/api/admin.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from ..database import get_session
from ..errors import PcforgeError
from ..models.customers import CustomerProfile
from ..models.events import Event
from ..models.orders import Order
from ..models.vendors import VendorProfile
from ..services import dashboard, quotations
from ..services.invoice import list_invoices, store_invoice
from ..services.order_status import (
    advance_order,
    cancel_order,
    get_order,
    parse_status,
    transition_order,
)
from ..services.session import require_role
from ..utils.helpers import http_error
from .orders import order_detail

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_role("admin"))],
)


# ============ Request Models ============

class StatusMessage(BaseModel):
    message: Optional[str] = None


class StatusChange(BaseModel):
    status: str
    message: Optional[str] = None


class QuotationDecision(BaseModel):
    vendor_id: str
    order_id: int
    accept: bool


# ============ Orders ============

@router.get("/orders")
def list_orders(status: Optional[str] = None, session: Session = Depends(get_session)):
    query = select(Order)
    if status:
        try:
            query = query.where(Order.status == parse_status(status).value)
        except PcforgeError as e:
            raise http_error(e)
    return session.exec(query.order_by(Order.order_date.desc())).all()


@router.get("/orders/{order_id}")
def get_order_detail(order_id: int, session: Session = Depends(get_session)):
    try:
        order = get_order(session, order_id)
    except PcforgeError as e:
        raise http_error(e)
    return order_detail(session, order)


@router.post("/orders/{order_id}/advance")
def advance(order_id: int, body: Optional[StatusMessage] = None, session: Session = Depends(get_session)):
    """Move the order to the next status in the sequence."""
    try:
        order = get_order(session, order_id)
        update = advance_order(session, order, body.message if body else None)
    except PcforgeError as e:
        raise http_error(e)
    return {"order_id": order.id, "status": order.status, "update": update}


@router.post("/orders/{order_id}/status")
def set_status(order_id: int, body: StatusChange, session: Session = Depends(get_session)):
    try:
        order = get_order(session, order_id)
        update = transition_order(session, order, body.status, body.message)
    except PcforgeError as e:
        raise http_error(e)
    return {"order_id": order.id, "status": order.status, "update": update}


@router.post("/orders/{order_id}/cancel")
def cancel(order_id: int, body: Optional[StatusMessage] = None, session: Session = Depends(get_session)):
    try:
        order = get_order(session, order_id)
        update = cancel_order(session, order, body.message if body else None)
    except PcforgeError as e:
        raise http_error(e)
    return {"order_id": order.id, "status": order.status, "update": update}


@router.post("/orders/{order_id}/invoice")
def regenerate_invoice(order_id: int, session: Session = Depends(get_session)):
    try:
        order = get_order(session, order_id)
    except PcforgeError as e:
        raise http_error(e)
    return {"order_id": order.id, "invoice_url": store_invoice(session, order)}


# ============ Quotations ============

@router.get("/quotations")
def list_quotations(status: Optional[str] = None, session: Session = Depends(get_session)):
    if status and status not in quotations.QUOTATION_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown quotation status {status}")
    rows = quotations.list_quotations(session, status=status)
    return [quotations.quotation_details(session, q) for q in rows]


@router.post("/quotations/decision")
def decide_quotation(body: QuotationDecision, session: Session = Depends(get_session)):
    try:
        quotation = quotations.record_decision(session, body.vendor_id, body.order_id, body.accept)
    except PcforgeError as e:
        raise http_error(e)
    return quotations.quotation_details(session, quotation)


# ============ Directory / reporting ============

@router.get("/customers")
def list_customers(session: Session = Depends(get_session)):
    return session.exec(select(CustomerProfile).order_by(CustomerProfile.full_name)).all()


@router.get("/vendors")
def list_vendors(session: Session = Depends(get_session)):
    return dashboard.vendor_leaderboard(session)


@router.get("/vendors/{vendor_id}")
def get_vendor(vendor_id: str, session: Session = Depends(get_session)):
    vendor = session.get(VendorProfile, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail=f"Vendor {vendor_id} not found")
    return vendor


@router.get("/invoices")
def invoices(session: Session = Depends(get_session)):
    return list_invoices(session)


@router.get("/dashboard")
def overview(session: Session = Depends(get_session)):
    return dashboard.order_summary(session)


@router.get("/events")
def get_events(session: Session = Depends(get_session), limit: int = 100):
    """
    Recent events from the Event table (used as event log).
    """
    return session.exec(
        select(Event).order_by(Event.event_date.desc()).limit(limit)
    ).all()
