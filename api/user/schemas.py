from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from core.roles import RoleName


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=100)
    name: Optional[str] = None
    role: RoleName
    customer_id: Optional[str] = None  # Required only when a system admin creates the user
    provider_group_id: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[RoleName] = None
    provider_group_id: Optional[str] = None


class UserStatusUpdate(BaseModel):
    active: bool


class UserNpiAssignment(BaseModel):
    provider_ids: list[str]


class UserResponse(BaseModel):
    id: str
    email: str
    username: str
    name: Optional[str]
    active: bool
    customer_id: Optional[str]
    provider_group_id: Optional[str]
    last_login_at: Optional[datetime]
    created_at: datetime
    roles: list[str] = []

    class Config:
        from_attributes = True


class UserCreatedResponse(UserResponse):
    # Shown once; only the hash is stored
    temporary_password: str


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int


class UserNpiResponse(BaseModel):
    id: str
    npi: str
    name: Optional[str]
    provider_group_id: Optional[str]

    class Config:
        from_attributes = True
