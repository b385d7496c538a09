from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: Optional[str] = Field(default=None, foreign_key="customerprofile.customer_id", index=True)
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    build_type: Optional[str] = None  # gaming, workstation, ...

    tracking_id: str = Field(index=True, unique=True)
    status: str = "order_received"

    component_cost: int = 0
    build_charge: int = 0
    shipping_charge: int = 0
    gst_amount: int = 0
    grand_total: int = 0

    order_date: datetime = Field(default_factory=datetime.utcnow)
    estimated_delivery: datetime
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    component_id: Optional[str] = Field(default=None, foreign_key="component.component_id")
    category: str  # component category, or "extra_storage"
    component_name: str
    unit_price: int
    quantity: int = 1

    @property
    def total_price(self) -> int:
        return self.unit_price * self.quantity


class OrderUpdate(SQLModel, table=True):
    """Append-only status history of an order."""
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    status: str
    message: str
    update_date: datetime = Field(default_factory=datetime.utcnow)
