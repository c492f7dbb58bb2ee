from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import User, Customer
from database.scoping import is_in_scope
from api.user import crud
from api.user.schemas import (
    UserCreate,
    UserUpdate,
    UserStatusUpdate,
    UserNpiAssignment,
    UserResponse,
    UserCreatedResponse,
    UserListResponse,
    UserNpiResponse,
)
from auth import UserContext, get_user_context, get_user_roles, require_capability, require_scope
from core.roles import RoleName, can_manage_user, get_primary_role

router = APIRouter()

manage_users = require_capability("can_manage_users")


def _get_managed_user(session: Session, ctx: UserContext, user_id: str) -> tuple[User, list[str]]:
    """Load a user the caller may modify, with the target's roles."""
    scope = require_scope(ctx)
    target = crud.get_user(session, user_id)
    if not target or not is_in_scope(scope, target.customer_id, target.provider_group_id):
        raise HTTPException(status_code=404, detail="User not found or not authorized to manage this user")

    if target.id == ctx.user.id:
        raise HTTPException(status_code=400, detail="Cannot modify your own account")

    target_roles = get_user_roles(session, target)
    if not can_manage_user(ctx.roles, target_roles):
        raise HTTPException(status_code=403, detail="Cannot manage a user with equal or higher authority")

    return target, target_roles


def _check_grantable_role(ctx: UserContext, role: RoleName) -> None:
    if not can_manage_user(ctx.roles, [role.value]):
        raise HTTPException(status_code=403, detail=f"You cannot assign the role {role.value}")


def _check_provider_group(
    session: Session,
    ctx: UserContext,
    provider_group_id: Optional[str],
    customer_id: Optional[str],
) -> None:
    """Validate a group assignment for the caller and the user's customer."""
    scope = require_scope(ctx)
    if scope.provider_group_id is not None and provider_group_id != scope.provider_group_id:
        raise HTTPException(status_code=400, detail="You can only assign users to your provider group")

    if provider_group_id and not crud.get_provider_group_for_customer(session, provider_group_id, customer_id):
        raise HTTPException(status_code=400, detail="Invalid provider group selected")


@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    ctx: UserContext = Depends(manage_users),
    session: Session = Depends(get_session),
):
    """List users visible to the caller."""
    scope = require_scope(ctx)
    users = crud.get_users(session, scope, search, skip, limit)
    total = crud.count_users(session, scope)
    return UserListResponse(
        users=[crud.user_to_response(session, u) for u in users],
        total=total,
    )


@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    ctx: UserContext = Depends(manage_users),
    session: Session = Depends(get_session),
):
    """Create a user with a temporary password."""
    scope = require_scope(ctx)
    _check_grantable_role(ctx, data.role)

    if scope.customer_id is not None:
        if data.customer_id and data.customer_id != scope.customer_id:
            raise HTTPException(status_code=403, detail="Cannot create users for other customers")
        customer_id = scope.customer_id
    else:
        if not data.customer_id:
            raise HTTPException(status_code=400, detail="customer_id is required")
        if not session.get(Customer, data.customer_id):
            raise HTTPException(status_code=404, detail="Customer not found")
        customer_id = data.customer_id

    _check_provider_group(session, ctx, data.provider_group_id, customer_id)

    if data.role == RoleName.PROVIDER_GROUP_ADMIN and not data.provider_group_id:
        raise HTTPException(status_code=400, detail="Provider group admins must be assigned to a provider group")

    if crud.get_user_by_email(session, data.email):
        raise HTTPException(status_code=400, detail="Email already exists")
    if crud.get_user_by_username(session, data.username):
        raise HTTPException(status_code=400, detail="Username already exists")

    try:
        user, temporary_password = crud.create_user(
            session,
            email=data.email,
            username=data.username,
            name=data.name,
            role_name=data.role.value,
            customer_id=customer_id,
            provider_group_id=data.provider_group_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {**crud.user_to_response(session, user), "temporary_password": temporary_password}


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Get user details. Everyone may view their own profile."""
    if user_id == ctx.user.id:
        return crud.user_to_response(session, ctx.user)

    if not ctx.permissions.can_manage_users:
        raise HTTPException(status_code=403, detail="Can only view own profile")

    scope = require_scope(ctx)
    user = crud.get_user(session, user_id)
    if not user or not is_in_scope(scope, user.customer_id, user.provider_group_id):
        raise HTTPException(status_code=404, detail="User not found")

    return crud.user_to_response(session, user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    data: UserUpdate,
    ctx: UserContext = Depends(manage_users),
    session: Session = Depends(get_session),
):
    """Update a user's name, role or provider group."""
    target, target_roles = _get_managed_user(session, ctx, user_id)

    update_data = data.model_dump(exclude_unset=True)
    role = update_data.pop("role", None)
    if role is not None:
        _check_grantable_role(ctx, role)

    if "provider_group_id" in update_data:
        _check_provider_group(session, ctx, update_data["provider_group_id"], target.customer_id)

    final_roles = [role.value] if role is not None else target_roles
    final_group = update_data.get("provider_group_id", target.provider_group_id)
    if RoleName.PROVIDER_GROUP_ADMIN.value in final_roles and not final_group:
        raise HTTPException(status_code=400, detail="Provider group admins must be assigned to a provider group")

    try:
        updated = crud.update_user(
            session,
            target,
            update_data,
            role_name=role.value if role is not None else None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return crud.user_to_response(session, updated)


@router.put("/{user_id}/status", response_model=UserResponse)
def update_user_status(
    user_id: str,
    data: UserStatusUpdate,
    ctx: UserContext = Depends(manage_users),
    session: Session = Depends(get_session),
):
    """Update user's active status (enable/disable account)."""
    target, _ = _get_managed_user(session, ctx, user_id)
    updated = crud.update_user_status(session, target, data.active)
    return crud.user_to_response(session, updated)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    ctx: UserContext = Depends(manage_users),
    session: Session = Depends(get_session),
):
    """Delete a user who has not created any submissions."""
    target, _ = _get_managed_user(session, ctx, user_id)

    if crud.count_created_submissions(session, target):
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a user with submissions; deactivate the account instead",
        )

    crud.delete_user(session, target)


@router.get("/{user_id}/npis", response_model=list[UserNpiResponse])
def get_user_npis(
    user_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """List NPIs assigned to a user."""
    if user_id == ctx.user.id:
        return crud.get_user_npis(session, ctx.user)

    if not ctx.permissions.can_manage_users:
        raise HTTPException(status_code=403, detail="Can only view own NPIs")

    scope = require_scope(ctx)
    user = crud.get_user(session, user_id)
    if not user or not is_in_scope(scope, user.customer_id, user.provider_group_id):
        raise HTTPException(status_code=404, detail="User not found")

    return crud.get_user_npis(session, user)


@router.put("/{user_id}/npis", response_model=list[UserNpiResponse])
def assign_user_npis(
    user_id: str,
    data: UserNpiAssignment,
    ctx: UserContext = Depends(manage_users),
    session: Session = Depends(get_session),
):
    """Replace the NPIs a basic user may submit for."""
    target, target_roles = _get_managed_user(session, ctx, user_id)

    if get_primary_role(target_roles) != RoleName.BASIC_USER.value:
        raise HTTPException(status_code=400, detail="NPIs can only be assigned to basic users")

    invalid = crud.find_invalid_npis(session, target, data.provider_ids)
    if invalid:
        raise HTTPException(status_code=400, detail="Some selected NPIs are not valid for this user")

    return crud.replace_user_npis(session, target, data.provider_ids)
