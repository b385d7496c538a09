# pcforge/api/vendor.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session, select

from ..database import get_session
from ..errors import PcforgeError
from ..models.orders import OrderItem
from ..models.vendors import VendorProfile
from ..services import quotations
from ..services.session import SessionState, require_role
from ..utils.helpers import http_error

router = APIRouter(prefix="/api/vendor", tags=["vendor"])


# ============ Request Models ============

class VendorProfileRequest(BaseModel):
    vendor_name: str = Field(min_length=1)
    store_name: str = Field(min_length=1)
    store_address: Optional[str] = None
    email: Optional[str] = None


class ComponentQuoteRequest(BaseModel):
    order_id: int
    order_item_id: int
    unit_price: int = Field(ge=0)
    quantity: Optional[int] = Field(default=None, ge=1)


# ============ Endpoints ============

@router.put("/profile")
def upsert_profile(
    request: VendorProfileRequest,
    state: SessionState = Depends(require_role("vendor")),
    session: Session = Depends(get_session),
):
    profile = session.get(VendorProfile, state.user_id)
    if profile is None:
        profile = VendorProfile(vendor_id=state.user_id, **request.model_dump())
    else:
        for key, value in request.model_dump().items():
            setattr(profile, key, value)
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@router.get("/orders")
def open_orders(
    state: SessionState = Depends(require_role("vendor")),
    session: Session = Depends(get_session),
):
    """Orders awaiting component quotes, each with its component lines."""
    orders = quotations.open_orders_for_vendor(session, state.user_id)
    out = []
    for o in orders:
        items = session.exec(select(OrderItem).where(OrderItem.order_id == o.id).order_by(OrderItem.id)).all()
        out.append({
            "order_id": o.id,
            "build_type": o.build_type,
            "order_date": o.order_date.isoformat(),
            "items": [
                {
                    "order_item_id": i.id,
                    "category": i.category,
                    "component_name": i.component_name,
                    "quantity": i.quantity,
                }
                for i in items
            ],
        })
    return out


@router.post("/quotes")
def submit_quote(
    request: ComponentQuoteRequest,
    state: SessionState = Depends(require_role("vendor")),
    session: Session = Depends(get_session),
):
    try:
        quotation = quotations.submit_component_quote(
            session,
            state.user_id,
            request.order_id,
            request.order_item_id,
            request.unit_price,
            request.quantity,
        )
    except PcforgeError as e:
        raise http_error(e)
    return quotations.quotation_details(session, quotation)


@router.get("/quotations")
def my_quotations(
    status: Optional[str] = None,
    state: SessionState = Depends(require_role("vendor")),
    session: Session = Depends(get_session),
):
    if status and status not in quotations.QUOTATION_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown quotation status {status}")
    rows = quotations.list_quotations(session, vendor_id=state.user_id, status=status)
    return [quotations.quotation_details(session, q) for q in rows]


@router.get("/stats")
def my_stats(
    state: SessionState = Depends(require_role("vendor")),
    session: Session = Depends(get_session),
):
    try:
        stats = quotations.vendor_stats(session, state.user_id)
    except PcforgeError as e:
        raise http_error(e)
    total = stats.orders_won + stats.orders_lost
    return {
        "vendor_id": stats.vendor_id,
        "orders_won": stats.orders_won,
        "orders_lost": stats.orders_lost,
        "win_rate_pct": round(stats.orders_won / total * 100, 1) if total else 0.0,
    }
