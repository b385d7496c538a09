# pcforge/services/checkout.py

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from sqlmodel import Session, select

from ..config import settings
from ..errors import NotFoundError, PcforgeError
from ..models.catalog import Component, ExtraStorageItem
from ..models.customers import CustomerProfile
from ..models.orders import Order, OrderItem
from . import pricing
from .event_logger import log_event
from .order_status import record_initial_status
from .session import hub
from .tracking import new_tracking_code

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\d{10}$")
ZIP_RE = re.compile(r"^\d{6}$")


# ============ Request Models ============

class ContactInfo(BaseModel):
    name: str = Field(min_length=1)
    email: str
    phone: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_RE.match(v):
            raise ValueError("invalid email address")
        return v.lower()

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        digits = re.sub(r"[\s-]", "", v)
        if not PHONE_RE.match(digits):
            raise ValueError("phone must be 10 digits")
        return digits


class Address(BaseModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zipcode: str

    @field_validator("zipcode")
    @classmethod
    def _zip(cls, v: str) -> str:
        v = v.strip()
        if not ZIP_RE.match(v):
            raise ValueError("zip code must be 6 digits")
        return v

    def one_line(self) -> str:
        return ", ".join([self.address, self.city, self.state, self.zipcode])


class BuildSelection(BaseModel):
    components: Dict[str, str]  # category -> component id
    extra_storage: List[str] = []  # ExtraStorageItem ids
    build_type: Optional[str] = None

    @field_validator("components")
    @classmethod
    def _categories(cls, v: Dict[str, str]) -> Dict[str, str]:
        unknown = set(v) - set(pricing.COMPONENT_CATEGORIES)
        if unknown:
            raise ValueError(f"unknown component categories: {', '.join(sorted(unknown))}")
        return v


class CheckoutRequest(BuildSelection):
    contact: ContactInfo
    shipping: Address


# ============ Pricing a selection ============

def _resolve(session: Session, selection: BuildSelection):
    chosen = {c: cid for c, cid in selection.components.items() if cid and cid != "none"}
    components: Dict[str, Component] = {}
    if chosen:
        rows = session.exec(
            select(Component).where(Component.component_id.in_(list(chosen.values())))
        ).all()
        by_id = {r.component_id: r for r in rows}
        for category, cid in chosen.items():
            comp = by_id.get(cid)
            if not comp:
                raise NotFoundError(f"Component {cid} not found")
            if comp.category != category:
                raise NotFoundError(f"Component {cid} is not a {category}")
            components[category] = comp

    extras: List[ExtraStorageItem] = []
    for item_id in selection.extra_storage:
        extra = session.get(ExtraStorageItem, item_id)
        if not extra:
            raise NotFoundError(f"Extra storage option {item_id} not found")
        extras.append(extra)
    return components, extras


def _price(components: Dict[str, Component], extras: List[ExtraStorageItem]) -> pricing.PriceBreakdown:
    cost = pricing.component_cost(
        {c: comp.component_id for c, comp in components.items()},
        {comp.component_id: comp.price for comp in components.values()},
        [e.price for e in extras],
    )
    return pricing.quote_build(cost)


def price_selection(session: Session, selection: BuildSelection) -> pricing.PriceBreakdown:
    components, extras = _resolve(session, selection)
    return _price(components, extras)


# ============ Placing an order ============

def upsert_customer(session: Session, customer_id: str, contact: ContactInfo, shipping: Address) -> CustomerProfile:
    """Create or overwrite the customer's profile (no commit)."""
    profile = session.get(CustomerProfile, customer_id)
    if profile is None:
        profile = CustomerProfile(customer_id=customer_id, full_name=contact.name, email=contact.email)
    profile.full_name = contact.name
    profile.email = contact.email
    profile.phone = contact.phone
    profile.address = shipping.address
    profile.city = shipping.city
    profile.state = shipping.state
    profile.zipcode = shipping.zipcode
    profile.updated_at = datetime.utcnow()
    session.add(profile)
    return profile


def place_order(session: Session, customer_id: str, req: CheckoutRequest) -> Order:
    """
    Create the order, its items and its first history row in one
    transaction, then run the best-effort follow-ups (invoice, e-mail,
    notification).
    """
    components, extras = _resolve(session, req)
    if not components:
        raise PcforgeError("No components selected")

    price = _price(components, extras)
    now = datetime.utcnow()

    try:
        upsert_customer(session, customer_id, req.contact, req.shipping)
        order = Order(
            customer_id=customer_id,
            customer_name=req.contact.name,
            customer_email=req.contact.email,
            customer_phone=req.contact.phone,
            shipping_address=req.shipping.one_line(),
            build_type=req.build_type,
            tracking_id=new_tracking_code(session),
            component_cost=price.component_cost,
            build_charge=price.build_charge,
            shipping_charge=price.delivery_charge,
            gst_amount=price.gst,
            grand_total=price.total,
            order_date=now,
            estimated_delivery=now + timedelta(days=settings.delivery_days),
            updated_at=now,
        )
        session.add(order)
        session.flush()

        for category in pricing.COMPONENT_CATEGORIES:
            comp = components.get(category)
            if comp is None:
                continue
            session.add(OrderItem(
                order_id=order.id,
                component_id=comp.component_id,
                category=category,
                component_name=comp.name,
                unit_price=comp.price,
            ))
        for extra in extras:
            session.add(OrderItem(
                order_id=order.id,
                category="extra_storage",
                component_name=extra.name,
                unit_price=extra.price,
            ))

        record_initial_status(session, order)
        log_event(
            session,
            "ORDER_CREATED",
            f"Order {order.tracking_id} placed by {customer_id} for {price.total}",
            {"order_id": order.id, "grand_total": price.total},
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    _after_checkout(session, order)
    return order


def _after_checkout(session: Session, order: Order) -> None:
    from .invoice import store_invoice
    from .notifications import send_order_confirmation

    invoice_url = None
    try:
        invoice_url = store_invoice(session, order)
    except Exception:
        session.rollback()
        logger.exception("Invoice generation failed for order %s", order.id)

    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    try:
        send_order_confirmation(order, items, invoice_url)
    except Exception:
        logger.exception("Confirmation email for order %s failed", order.id)

    hub.publish(
        "order.created",
        {"order_id": order.id, "tracking_id": order.tracking_id, "grand_total": order.grand_total},
    )
