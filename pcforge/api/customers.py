# pcforge/api/customers.py

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from ..database import get_session
from ..models.customers import CustomerProfile
from ..services.checkout import Address, ContactInfo, upsert_customer
from ..services.event_logger import log_event
from ..services.session import SessionState, require_role

router = APIRouter(prefix="/api/customers", tags=["customers"])


class CustomerProfileRequest(BaseModel):
    contact: ContactInfo
    address: Address


@router.get("/me")
def get_my_profile(
    state: SessionState = Depends(require_role("customer")),
    session: Session = Depends(get_session),
):
    profile = session.get(CustomerProfile, state.user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("/me")
def update_my_profile(
    request: CustomerProfileRequest,
    state: SessionState = Depends(require_role("customer")),
    session: Session = Depends(get_session),
):
    """Name, email and phone are required; the address is the default shipping address."""
    try:
        profile = upsert_customer(session, state.user_id, request.contact, request.address)
        log_event(session, "CUSTOMER_PROFILE_UPDATED", f"Profile of {state.user_id} updated")
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(profile)
    return profile
