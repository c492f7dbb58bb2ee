from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from api.user.schemas import UserCreatedResponse


class CustomerAdminCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=100)
    name: Optional[str] = None


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    baa_number: Optional[str] = None
    baa_date: Optional[datetime] = None
    admin: Optional[CustomerAdminCreate] = None  # First customer administrator


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    baa_number: Optional[str] = None
    baa_date: Optional[datetime] = None
    active: Optional[bool] = None


class CustomerResponse(BaseModel):
    id: str
    name: str
    description: str
    active: bool
    baa_number: Optional[str]
    baa_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerCreatedResponse(BaseModel):
    customer: CustomerResponse
    admin: Optional[UserCreatedResponse] = None


class CustomerListResponse(BaseModel):
    customers: list[CustomerResponse]
    total: int
