from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlmodel import Session

from database.connection import get_session
from auth import (
    UserContext,
    authenticate_user,
    get_user_context,
    get_user_roles,
    issue_token,
)
from api.auth.schemas import LoginRequest, LoginResponse, MeResponse, SessionUser
from config.auth_settings import ACCESS_TOKEN_COOKIE, ACCESS_TOKEN_EXPIRE_HOURS, COOKIE_SECURE
from core.roles import get_primary_role, get_dashboard_url
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, response: Response, session: Session = Depends(get_session)):
    """Authenticate with username or email and start a session."""
    user = authenticate_user(session, data.login, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    roles = get_user_roles(session, user)
    token = issue_token(user.id, user.username)

    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_HOURS * 3600,
    )
    logger.info(f"User {user.username} logged in")

    return LoginResponse(
        access_token=token,
        user=SessionUser.model_validate(user),
        roles=roles,
        primary_role=get_primary_role(roles),
        dashboard_url=get_dashboard_url(roles),
    )


@router.post("/logout")
def logout(response: Response):
    """Logout and clear session cookie."""
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE, samesite="lax")
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
def get_me(ctx: UserContext = Depends(get_user_context)):
    """Get current authenticated user with roles and capabilities."""
    scope = ctx.scope
    return MeResponse(
        user=SessionUser.model_validate(ctx.user),
        roles=ctx.roles,
        primary_role=ctx.primary_role,
        dashboard_url=get_dashboard_url(ctx.roles),
        permissions=ctx.permissions.as_dict(),
        scope=scope.as_dict() if scope is not None else None,
    )
