# pcforge/api/catalog.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from ..database import get_session
from ..errors import PcforgeError
from ..models.catalog import Component, ExtraStorageItem
from ..services.checkout import BuildSelection, price_selection
from ..services.pricing import COMPONENT_CATEGORIES
from ..utils.helpers import http_error

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/components")
def list_components(category: Optional[str] = None, session: Session = Depends(get_session)):
    if category and category not in COMPONENT_CATEGORIES:
        raise HTTPException(status_code=404, detail=f"Unknown category {category}")
    query = select(Component)
    if category:
        query = query.where(Component.category == category)
    return session.exec(query.order_by(Component.category, Component.price)).all()


@router.get("/extra-storage")
def list_extra_storage(session: Session = Depends(get_session)):
    return session.exec(select(ExtraStorageItem).order_by(ExtraStorageItem.price)).all()


@router.post("/quote")
def quote(selection: BuildSelection, session: Session = Depends(get_session)):
    """
    Price a selection without placing an order.

    Returns component_cost, build_charge, weight, delivery_charge, gst, total.
    """
    try:
        return price_selection(session, selection).to_dict()
    except PcforgeError as e:
        raise http_error(e)
