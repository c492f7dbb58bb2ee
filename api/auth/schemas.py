from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class LoginRequest(BaseModel):
    login: str  # Username or email
    password: str


class SessionUser(BaseModel):
    id: str
    email: str
    username: str
    name: Optional[str]
    customer_id: Optional[str]
    provider_group_id: Optional[str]
    last_login_at: Optional[datetime]

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser
    roles: list[str]
    primary_role: str
    dashboard_url: str


class MeResponse(BaseModel):
    user: SessionUser
    roles: list[str]
    primary_role: str
    dashboard_url: str
    permissions: dict
    scope: Optional[dict]
