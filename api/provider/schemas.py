from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

# National Provider Identifier: exactly ten digits
NPI_PATTERN = r"^\d{10}$"


class ProviderCreate(BaseModel):
    npi: str = Field(pattern=NPI_PATTERN)
    name: Optional[str] = Field(default=None, max_length=255)
    customer_id: Optional[str] = None  # Required only for system admins
    provider_group_id: Optional[str] = None


class ProviderUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    active: Optional[bool] = None


class ProviderGroupAssignment(BaseModel):
    provider_group_id: Optional[str] = None  # None removes the NPI from its group


class ProviderResponse(BaseModel):
    id: str
    npi: str
    name: Optional[str]
    active: bool
    customer_id: str
    provider_group_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProviderListResponse(BaseModel):
    providers: list[ProviderResponse]
    total: int
