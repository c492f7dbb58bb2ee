"""Database models for NPIs (National Provider Identifiers) and their user assignments."""
import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional


class Provider(SQLModel, table=True):
    """A single NPI owned by a customer and optionally a provider group."""
    __tablename__ = "providers"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    npi: str = Field(unique=True, index=True, max_length=10)
    name: Optional[str] = Field(default=None, max_length=255)
    active: bool = Field(default=True)
    customer_id: str = Field(foreign_key="customers.id", index=True)
    provider_group_id: Optional[str] = Field(default=None, foreign_key="provider_groups.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class UserNpi(SQLModel, table=True):
    """NPIs a basic user is allowed to submit for."""
    __tablename__ = "user_npis"
    __table_args__ = (UniqueConstraint("user_id", "provider_id"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    provider_id: str = Field(foreign_key="providers.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
