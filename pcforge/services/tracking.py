# pcforge/services/tracking.py

import random
from dataclasses import dataclass, field
from typing import List, Optional

from sqlmodel import Session, select

from ..config import settings
from ..models.orders import Order, OrderUpdate
from .order_status import STATUS_LABELS, order_history, parse_status

MAX_ATTEMPTS = 20


def generate_tracking_code(prefix: Optional[str] = None, rng: Optional[random.Random] = None) -> str:
    """PREFIX-###### with six random digits (100000-999999)."""
    rng = rng or random.SystemRandom()
    prefix = (prefix or settings.tracking_prefix).upper()
    return f"{prefix}-{rng.randint(100000, 999999)}"


def new_tracking_code(session: Session, prefix: Optional[str] = None) -> str:
    """A tracking code not yet used by any order."""
    for _ in range(MAX_ATTEMPTS):
        code = generate_tracking_code(prefix)
        exists = session.exec(select(Order.id).where(Order.tracking_id == code)).first()
        if exists is None:
            return code
    raise RuntimeError("Could not allocate a unique tracking code")


@dataclass
class TrackingResult:
    tracking_id: str
    found: bool
    order: Optional[Order] = None
    updates: List[OrderUpdate] = field(default_factory=list)

    def to_dict(self) -> dict:
        if not self.found:
            return {"tracking_id": self.tracking_id, "found": False}
        o = self.order
        return {
            "tracking_id": self.tracking_id,
            "found": True,
            "customer_name": o.customer_name,
            "status": o.status,
            "status_label": STATUS_LABELS[parse_status(o.status)],
            "order_date": o.order_date.isoformat(),
            "estimated_delivery": o.estimated_delivery.isoformat(),
            "updates": [
                {
                    "date": u.update_date.isoformat(),
                    "status": u.status,
                    "message": u.message,
                }
                for u in self.updates
            ],
        }


def find_by_tracking_code(session: Session, code: str) -> TrackingResult:
    code = (code or "").strip().upper()
    order = session.exec(select(Order).where(Order.tracking_id == code)).first()
    if not order:
        return TrackingResult(tracking_id=code, found=False)
    return TrackingResult(
        tracking_id=code,
        found=True,
        order=order,
        updates=order_history(session, order.id),
    )
