from dataclasses import dataclass
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from database.models import User
from database.connection import get_session
from auth.token import extract_claims
from auth.service import get_user_roles
from config.auth_settings import ACCESS_TOKEN_COOKIE
from core.roles import RoleName, get_primary_role, has_role_access
from core.permissions import SubmissionPermissions, get_submission_permissions
from core.scope import ScopeFilter, get_scope_filter


security = HTTPBearer(auto_error=False)


@dataclass
class UserContext:
    """Authenticated caller with a fresh snapshot of roles and affiliation."""
    user: User
    roles: list[str]

    @property
    def primary_role(self) -> str:
        return get_primary_role(self.roles)

    @property
    def permissions(self) -> SubmissionPermissions:
        return get_submission_permissions(self.primary_role)

    @property
    def scope(self) -> ScopeFilter | None:
        return get_scope_filter(self.roles, self.user.provider_group_id, self.user.customer_id)

    def has_role(self, role: RoleName | str) -> bool:
        return has_role_access(self.roles, [role])


def get_token_from_request(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Extract token from Authorization header or cookie."""
    if credentials:
        return credentials.credentials

    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(get_token_from_request),
    session: Session = Depends(get_session),
) -> User:
    """Get current authenticated user from token."""
    claims = extract_claims(token)
    user = session.get(User, claims.user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    return user


def get_user_context(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> UserContext:
    """Get current user with their role names."""
    return UserContext(user=user, roles=get_user_roles(session, user))


def require_scope(ctx: UserContext) -> ScopeFilter:
    """Resolve the caller's scope, treating a missing scope as a denial."""
    scope = ctx.scope
    if scope is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No authorized scope for this operation",
        )
    return scope


class RoleChecker:
    """Dependency class for checking that the caller holds one of the roles."""

    def __init__(self, *required_roles: RoleName | str):
        self.required_roles = [
            role.value if isinstance(role, RoleName) else role
            for role in required_roles
        ]

    def __call__(self, ctx: UserContext = Depends(get_user_context)) -> UserContext:
        if not has_role_access(ctx.roles, self.required_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions: one of {', '.join(self.required_roles)} required",
            )
        return ctx


def require_roles(*roles: RoleName | str):
    """Factory function to create role dependency."""
    return RoleChecker(*roles)


class CapabilityChecker:
    """Dependency class for checking a management capability of the primary role."""

    def __init__(self, capability: str):
        self.capability = capability

    def __call__(self, ctx: UserContext = Depends(get_user_context)) -> UserContext:
        if not getattr(ctx.permissions, self.capability, False):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {self.capability} required",
            )
        return ctx


def require_capability(capability: str):
    """Factory function to create capability dependency."""
    return CapabilityChecker(capability)
