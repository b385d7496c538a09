# pcforge/services/dashboard.py
"""
Admin overview figures, aggregated with pandas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

import numpy as np
import pandas as pd
from sqlmodel import Session, select

from ..models.orders import Order
from ..models.vendors import VendorProfile, VendorStats
from .order_status import STATUS_SEQUENCE, OrderStatus


def _to_native(obj):
    """
    Recursively convert numpy scalars / containers into plain Python types,
    so FastAPI's jsonable_encoder can serialize the response.
    """
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)

    if isinstance(obj, dict):
        return {k: _to_native(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_native(v) for v in obj]
    if isinstance(obj, tuple):
        return tuple(_to_native(v) for v in obj)

    return obj


def _orders_frame(session: Session) -> pd.DataFrame:
    orders = session.exec(select(Order)).all()
    return pd.DataFrame(
        [
            {
                "status": o.status,
                "grand_total": o.grand_total,
                "gst_amount": o.gst_amount,
                "build_charge": o.build_charge,
                "shipping_charge": o.shipping_charge,
                "order_date": o.order_date,
            }
            for o in orders
        ],
        columns=["status", "grand_total", "gst_amount", "build_charge", "shipping_charge", "order_date"],
    )


def order_summary(session: Session) -> Dict[str, Any]:
    """
    Returns:
      - orders_by_status: every status (zero-filled), sequence order
      - revenue: totals over non-cancelled orders
      - orders_last_30_days
    """
    df = _orders_frame(session)
    statuses = [s.value for s in STATUS_SEQUENCE] + [OrderStatus.CANCELLED.value]

    counts = df["status"].value_counts().reindex(statuses, fill_value=0)
    live = df[df["status"] != OrderStatus.CANCELLED.value]

    if df.empty:
        recent = 0
    else:
        cutoff = pd.Timestamp(datetime.utcnow()) - pd.Timedelta(days=30)
        recent = int((pd.to_datetime(df["order_date"]) >= cutoff).sum())

    return _to_native({
        "total_orders": len(df),
        "orders_by_status": counts.to_dict(),
        "revenue": {
            "grand_total": live["grand_total"].sum(),
            "gst": live["gst_amount"].sum(),
            "build_charges": live["build_charge"].sum(),
            "shipping": live["shipping_charge"].sum(),
            "average_order_value": round(float(live["grand_total"].mean()), 2) if not live.empty else 0.0,
        },
        "orders_last_30_days": recent,
    })


def vendor_leaderboard(session: Session) -> List[Dict[str, Any]]:
    """Vendors ranked by win rate, then by orders won."""
    rows = session.exec(select(VendorProfile, VendorStats).join(
        VendorStats, VendorStats.vendor_id == VendorProfile.vendor_id, isouter=True
    )).all()
    df = pd.DataFrame(
        [
            {
                "vendor_id": v.vendor_id,
                "vendor_name": v.vendor_name,
                "store_name": v.store_name,
                "orders_won": s.orders_won if s else 0,
                "orders_lost": s.orders_lost if s else 0,
            }
            for v, s in rows
        ],
        columns=["vendor_id", "vendor_name", "store_name", "orders_won", "orders_lost"],
    )
    if df.empty:
        return []

    decided = df["orders_won"] + df["orders_lost"]
    df["win_rate_pct"] = np.where(decided > 0, (df["orders_won"] / decided.replace(0, 1) * 100).round(1), 0.0)
    df = df.sort_values(["win_rate_pct", "orders_won"], ascending=[False, False])
    return _to_native(df.to_dict(orient="records"))
