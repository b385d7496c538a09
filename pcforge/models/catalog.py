from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class Component(SQLModel, table=True):
    component_id: str = Field(primary_key=True)
    category: str = Field(index=True)  # processor, graphics, memory, ...
    name: str
    price: int  # INR, whole rupees
    stock: int = 0
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ExtraStorageItem(SQLModel, table=True):
    item_id: str = Field(primary_key=True)
    name: str
    price: int
    description: Optional[str] = None
