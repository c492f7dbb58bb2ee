import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from typing import Optional


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True, max_length=255)
    description: str = Field(default="", max_length=1000)
    active: bool = Field(default=True)
    baa_number: Optional[str] = Field(default=None, unique=True, max_length=100)  # Business Associate Agreement
    baa_date: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
