# pcforge/services/payments.py
"""
Payment-gateway orders (Razorpay ``/v1/orders``).

The gateway object is returned untouched; the client completes payment
against it.
"""

import logging
import math
import time
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..errors import PaymentError

logger = logging.getLogger(__name__)


class PaymentGateway:
    def __init__(
        self,
        base_url: str,
        key_id: str,
        key_secret: str,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            timeout=settings.http_timeout,
            auth=(key_id, key_secret),
            transport=transport,
        )

    def create_order(self, amount: float, user_id: str, currency: str = "INR") -> Dict[str, Any]:
        if amount is None or isinstance(amount, bool) or math.isnan(amount) or amount <= 0:
            raise PaymentError("Invalid amount", status_code=400)

        body = {
            "amount": amount,
            "currency": currency,
            "receipt": f"receipt_{int(time.time() * 1000)}",
            "payment_capture": 1,
            "notes": {"user_id": user_id},
        }
        try:
            response = self.client.post(f"{self.base_url}/v1/orders", json=body)
        except httpx.HTTPError as e:
            logger.error("Payment gateway unreachable: %s", e)
            raise PaymentError("Payment gateway unreachable") from e

        if response.is_error:
            logger.error("Payment gateway error %s: %s", response.status_code, response.text)
            raise PaymentError("Failed to create payment order", status_code=response.status_code)

        data = response.json()
        logger.info("Payment order %s created for user %s", data.get("id"), user_id)
        return data

    def close(self):
        self.client.close()


_gateway: Optional[PaymentGateway] = None


def get_gateway() -> PaymentGateway:
    global _gateway
    if _gateway is None:
        _gateway = PaymentGateway(
            settings.razorpay_api,
            settings.razorpay_key_id,
            settings.razorpay_key_secret,
        )
    return _gateway


def set_gateway(gateway: Optional[PaymentGateway]) -> None:
    global _gateway
    _gateway = gateway


def create_payment_order(amount: float, user_id: str) -> Dict[str, Any]:
    return get_gateway().create_order(amount, user_id)
