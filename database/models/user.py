import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from typing import Optional


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    username: str = Field(unique=True, index=True, max_length=100)
    name: Optional[str] = Field(default=None, max_length=255)
    active: bool = Field(default=True)
    customer_id: Optional[str] = Field(default=None, foreign_key="customers.id", index=True)
    provider_group_id: Optional[str] = Field(default=None, foreign_key="provider_groups.id", index=True)
    password_hash: Optional[str] = Field(default=None, max_length=255)
    last_login_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
