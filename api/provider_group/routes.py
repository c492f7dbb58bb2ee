from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import Customer, ProviderGroup
from database.scoping import is_in_scope
from api.provider_group import crud
from api.provider_group.schemas import (
    ProviderGroupCreate,
    ProviderGroupUpdate,
    ProviderGroupResponse,
    ProviderGroupListResponse,
)
from auth import UserContext, get_user_context, require_capability, require_scope
from core.scope import can_manage_provider_group

router = APIRouter()

manage_groups = require_capability("can_manage_provider_groups")


def _get_visible_group(session: Session, ctx: UserContext, provider_group_id: str) -> ProviderGroup:
    scope = require_scope(ctx)
    group = crud.get_provider_group(session, provider_group_id)
    if not group or not is_in_scope(scope, group.customer_id, group.id):
        raise HTTPException(status_code=404, detail="Provider group not found")
    return group


def _get_managed_group(session: Session, ctx: UserContext, provider_group_id: str) -> ProviderGroup:
    group = _get_visible_group(session, ctx, provider_group_id)
    if not can_manage_provider_group(ctx.roles, ctx.user.provider_group_id, group.id):
        raise HTTPException(status_code=403, detail="Cannot manage this provider group")
    return group


@router.get("", response_model=ProviderGroupListResponse)
def list_provider_groups(
    customer_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """List provider groups visible to the caller."""
    scope = require_scope(ctx)
    groups = crud.get_provider_groups(session, scope, customer_id, skip, limit)
    total = crud.count_provider_groups(session, scope, customer_id)
    return ProviderGroupListResponse(
        provider_groups=[crud.to_response(session, g) for g in groups],
        total=total,
    )


@router.post("", response_model=ProviderGroupResponse, status_code=status.HTTP_201_CREATED)
def create_provider_group(
    data: ProviderGroupCreate,
    ctx: UserContext = Depends(manage_groups),
    session: Session = Depends(get_session),
):
    """Create a provider group within a customer."""
    scope = require_scope(ctx)

    if scope.customer_id is not None:
        if data.customer_id and data.customer_id != scope.customer_id:
            raise HTTPException(status_code=403, detail="Cannot create provider groups for other customers")
        customer_id = scope.customer_id
    else:
        if not data.customer_id:
            raise HTTPException(status_code=400, detail="customer_id is required")
        if not session.get(Customer, data.customer_id):
            raise HTTPException(status_code=404, detail="Customer not found")
        customer_id = data.customer_id

    if crud.get_provider_group_by_name(session, customer_id, data.name):
        raise HTTPException(status_code=400, detail="A provider group with this name already exists")

    group = crud.create_provider_group(session, customer_id, data.name, data.description)
    return crud.to_response(session, group)


@router.get("/{provider_group_id}", response_model=ProviderGroupResponse)
def get_provider_group(
    provider_group_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Get provider group details."""
    group = _get_visible_group(session, ctx, provider_group_id)
    return crud.to_response(session, group)


@router.patch("/{provider_group_id}", response_model=ProviderGroupResponse)
def update_provider_group(
    provider_group_id: str,
    data: ProviderGroupUpdate,
    ctx: UserContext = Depends(manage_groups),
    session: Session = Depends(get_session),
):
    """Update provider group details."""
    group = _get_managed_group(session, ctx, provider_group_id)

    if data.name and data.name != group.name:
        if crud.get_provider_group_by_name(session, group.customer_id, data.name):
            raise HTTPException(status_code=400, detail="A provider group with this name already exists")

    updated = crud.update_provider_group(session, group, data.model_dump(exclude_unset=True))
    return crud.to_response(session, updated)


@router.delete("/{provider_group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_provider_group(
    provider_group_id: str,
    ctx: UserContext = Depends(manage_groups),
    session: Session = Depends(get_session),
):
    """Delete an empty provider group."""
    group = _get_managed_group(session, ctx, provider_group_id)

    users, providers = crud.count_members(session, group.id)
    if users or providers:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete provider group with {users} users and {providers} NPIs assigned",
        )

    crud.delete_provider_group(session, group)
