from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class Event(SQLModel, table=True):
    event_id: str = Field(primary_key=True)
    event_type: str
    description: str
    event_date: datetime
    metadata_json: Optional[str] = None


class TrackingFile(SQLModel, table=True):
    """Files attached to an order (currently only invoices)."""
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    file_name: str
    file_type: str  # "invoice"
    file_url: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
