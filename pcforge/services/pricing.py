# pcforge/services/pricing.py
"""
Build pricing.

    component cost  = selected component prices + extra storage add-ons
    build charge    = tiered flat fee on component cost
    delivery charge = clamp(weight * 200, 500, 2000)
    GST             = round(18% of cost + build charge + delivery)
    total           = cost + build charge + delivery + GST

All amounts are whole rupees.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Mapping

from ..config import settings
from ..errors import InvalidPriceInput

COMPONENT_CATEGORIES = [
    "processor",
    "graphics",
    "memory",
    "storage",
    "cooling",
    "power",
    "motherboard",
    "case",
]

# (upper bound exclusive, fee)
BUILD_CHARGE_TIERS = [
    (25_000, 2_500),
    (50_000, 3_500),
    (100_000, 5_000),
]
BUILD_CHARGE_MAX = 7_500
PERCENTAGE_BUILD_RATE = 0.05

DEFAULT_WEIGHT_KG = 5
DELIVERY_RATE_PER_KG = 200
DELIVERY_MIN = 500
DELIVERY_MAX = 2_000
GST_RATE = 0.18

# kg per selected component, used for invoice weight estimates
COMPONENT_WEIGHTS_KG: Dict[str, float] = {
    "processor": 0.5,
    "graphics": 1.5,
    "memory": 0.2,
    "storage": 0.3,
    "cooling": 1.0,
    "power": 2.0,
    "motherboard": 1.0,
    "case": 5.0,
}
CABLES_WEIGHT_KG = 1.0


@dataclass
class PriceBreakdown:
    component_cost: int
    build_charge: int
    weight: float
    delivery_charge: int
    gst: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_amount(name: str, value: float) -> None:
    if value is None or math.isnan(value) or value < 0:
        raise InvalidPriceInput(f"{name} must be a non-negative number, got {value!r}")


def build_charge(component_cost: float) -> int:
    _check_amount("component_cost", component_cost)
    for upper, fee in BUILD_CHARGE_TIERS:
        if component_cost < upper:
            return fee
    return BUILD_CHARGE_MAX


def percentage_build_charge(component_cost: float) -> int:
    """5% of component cost; the alternative policy shown on build summaries."""
    _check_amount("component_cost", component_cost)
    return _round_half_up(component_cost * PERCENTAGE_BUILD_RATE)


def build_charge_for_policy(component_cost: float, policy: str | None = None) -> int:
    policy = policy or settings.build_charge_policy
    if policy == "percentage":
        return percentage_build_charge(component_cost)
    if policy == "tiered":
        return build_charge(component_cost)
    raise ValueError(f"Unknown build charge policy: {policy}")


def delivery_charge(weight_kg: float) -> int:
    _check_amount("weight", weight_kg)
    return _round_half_up(min(DELIVERY_MAX, max(DELIVERY_MIN, weight_kg * DELIVERY_RATE_PER_KG)))


def gst(subtotal: float) -> int:
    _check_amount("subtotal", subtotal)
    return _round_half_up(subtotal * GST_RATE)


def quote_build(
    component_cost: float,
    weight_kg: float = DEFAULT_WEIGHT_KG,
    policy: str | None = None,
) -> PriceBreakdown:
    _check_amount("component_cost", component_cost)
    cost = _round_half_up(component_cost)
    charge = build_charge_for_policy(cost, policy)
    delivery = delivery_charge(weight_kg)
    subtotal = cost + charge + delivery
    tax = gst(subtotal)
    return PriceBreakdown(
        component_cost=cost,
        build_charge=charge,
        weight=weight_kg,
        delivery_charge=delivery,
        gst=tax,
        total=subtotal + tax,
    )


def component_cost(
    selection: Mapping[str, str],
    prices: Mapping[str, int],
    extra_storage_prices: Iterable[int] = (),
) -> int:
    """
    Sum the prices of the selected components plus the add-on storage items.

    ``selection`` maps category -> component id; empty ids and "none" are
    skipped. ``prices`` maps component id -> price; unknown ids count as 0.
    """
    total = 0
    for _category, component_id in selection.items():
        if not component_id or component_id == "none":
            continue
        total += prices.get(component_id, 0)
    for p in extra_storage_prices:
        _check_amount("extra storage price", p)
        total += p
    return total


def estimate_weight(selection: Mapping[str, str]) -> float:
    """Shipping weight (kg) from the selected categories, plus cables."""
    weight = sum(
        COMPONENT_WEIGHTS_KG.get(category, 0.0)
        for category, component_id in selection.items()
        if component_id and component_id != "none"
    )
    return weight + CABLES_WEIGHT_KG
