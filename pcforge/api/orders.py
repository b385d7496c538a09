# pcforge/api/orders.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlmodel import Session, select

from ..database import get_session
from ..errors import PcforgeError
from ..models.events import TrackingFile
from ..models.orders import Order, OrderItem
from ..services.checkout import CheckoutRequest, place_order
from ..services.order_status import STATUS_LABELS, order_history, parse_status
from ..services.session import SessionState, require_role
from ..services.tracking import find_by_tracking_code
from ..utils.helpers import http_error

router = APIRouter(prefix="/api", tags=["orders"])


def order_detail(session: Session, order: Order) -> dict:
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id).order_by(OrderItem.id)).all()
    invoice = session.exec(
        select(TrackingFile).where(TrackingFile.order_id == order.id, TrackingFile.file_type == "invoice")
    ).first()
    return {
        **order.model_dump(),
        "status_label": STATUS_LABELS[parse_status(order.status)],
        "items": [{**i.model_dump(), "total_price": i.total_price} for i in items],
        "updates": order_history(session, order.id),
        "invoice_url": invoice.file_url if invoice else None,
    }


@router.post("/orders", status_code=201)
def create_order(
    request: CheckoutRequest,
    state: SessionState = Depends(require_role("customer")),
    session: Session = Depends(get_session),
):
    try:
        order = place_order(session, state.user_id, request)
    except PcforgeError as e:
        raise http_error(e)
    return order_detail(session, order)


@router.get("/orders/mine")
def my_orders(
    state: SessionState = Depends(require_role("customer")),
    session: Session = Depends(get_session),
):
    return session.exec(
        select(Order).where(Order.customer_id == state.user_id).order_by(Order.order_date.desc())
    ).all()


@router.get("/orders/{order_id}")
def get_order(
    order_id: int,
    state: SessionState = Depends(require_role("customer", "admin")),
    session: Session = Depends(get_session),
):
    order = session.get(Order, order_id)
    # customers only see their own orders; same 404 either way
    if not order or (not state.is_admin and order.customer_id != state.user_id):
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return order_detail(session, order)


@router.get("/tracking/{tracking_id}")
def track_order(tracking_id: str, session: Session = Depends(get_session)):
    """
    Public lookup by tracking ID. Unknown codes answer 404 with
    ``{"tracking_id": ..., "found": false}``.
    """
    result = find_by_tracking_code(session, tracking_id)
    if not result.found:
        return JSONResponse(status_code=404, content=result.to_dict())
    return result.to_dict()
