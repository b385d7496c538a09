from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class VendorProfile(SQLModel, table=True):
    vendor_id: str = Field(primary_key=True)
    vendor_name: str
    store_name: str
    store_address: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class VendorQuotation(SQLModel, table=True):
    """One per (vendor, order); price is the sum of the component quotes."""
    id: Optional[int] = Field(default=None, primary_key=True)
    vendor_id: str = Field(foreign_key="vendorprofile.vendor_id", index=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    price: int = 0
    status: str = "pending"  # pending -> accepted | rejected
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ComponentQuotation(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    vendor_id: str = Field(foreign_key="vendorprofile.vendor_id", index=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    order_item_id: int = Field(foreign_key="orderitem.id")
    component_name: str
    quoted_price: int
    quantity: int = 1
    status: str = "pending"
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class VendorStats(SQLModel, table=True):
    vendor_id: str = Field(primary_key=True, foreign_key="vendorprofile.vendor_id")
    orders_won: int = 0
    orders_lost: int = 0
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class VendorOrder(SQLModel, table=True):
    """Marks an order as processed (accepted / rejected) for a vendor."""
    id: Optional[int] = Field(default=None, primary_key=True)
    vendor_id: str = Field(foreign_key="vendorprofile.vendor_id", index=True)
    order_id: int = Field(foreign_key="order.id")
    status: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)
