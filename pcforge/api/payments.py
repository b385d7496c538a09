# pcforge/api/payments.py

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..errors import PcforgeError
from ..services.payments import create_payment_order
from ..services.session import SessionState, require_role
from ..utils.helpers import http_error

router = APIRouter(prefix="/api/payments", tags=["payments"])


class PaymentOrderRequest(BaseModel):
    amount: int = Field(gt=0)  # smallest currency unit (paise)


@router.post("/orders")
def create_order(
    request: PaymentOrderRequest,
    state: SessionState = Depends(require_role("customer")),
):
    try:
        return create_payment_order(request.amount, state.user_id)
    except PcforgeError as e:
        raise http_error(e)
