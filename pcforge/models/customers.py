from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class CustomerProfile(SQLModel, table=True):
    customer_id: str = Field(primary_key=True)
    full_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
