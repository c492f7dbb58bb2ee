from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ProviderGroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    customer_id: Optional[str] = None  # Required only for system admins


class ProviderGroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    active: Optional[bool] = None


class ProviderGroupResponse(BaseModel):
    id: str
    customer_id: str
    name: str
    description: str
    active: bool
    user_count: int = 0
    provider_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProviderGroupListResponse(BaseModel):
    provider_groups: list[ProviderGroupResponse]
    total: int
