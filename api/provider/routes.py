from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import Customer, Provider, ProviderGroup
from database.scoping import is_in_scope
from api.provider import crud
from api.provider.schemas import (
    ProviderCreate,
    ProviderUpdate,
    ProviderGroupAssignment,
    ProviderResponse,
    ProviderListResponse,
)
from api.user import crud as user_crud
from auth import UserContext, get_user_context, require_capability, require_scope
from core.roles import RoleName
from core.scope import can_manage_provider_group

router = APIRouter()

manage_npis = require_capability("can_manage_npis")


def _get_managed_provider(session: Session, ctx: UserContext, provider_id: str) -> Provider:
    scope = require_scope(ctx)
    provider = crud.get_provider(session, provider_id)
    if not provider or not is_in_scope(scope, provider.customer_id, provider.provider_group_id):
        raise HTTPException(status_code=404, detail="NPI not found")
    return provider


def _check_group_assignment(
    session: Session,
    ctx: UserContext,
    provider_group_id: Optional[str],
    customer_id: str,
) -> None:
    """Validate that the caller may place an NPI in the given group."""
    if not can_manage_provider_group(ctx.roles, ctx.user.provider_group_id, provider_group_id):
        raise HTTPException(status_code=403, detail="Cannot assign NPIs to this provider group")

    if provider_group_id:
        group = session.get(ProviderGroup, provider_group_id)
        if not group or group.customer_id != customer_id:
            raise HTTPException(status_code=400, detail="Invalid provider group selected")


@router.get("", response_model=ProviderListResponse)
def list_providers(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """List NPIs visible to the caller. Basic users see their assigned NPIs."""
    scope = ctx.scope
    if scope is None:
        if not ctx.has_role(RoleName.BASIC_USER):
            raise HTTPException(status_code=403, detail="No authorized scope for this operation")
        assigned = user_crud.get_user_npis(session, ctx.user)
        return ProviderListResponse(providers=assigned, total=len(assigned))

    providers = crud.get_providers(session, scope, search, skip, limit)
    total = crud.count_providers(session, scope, search)
    return ProviderListResponse(providers=providers, total=total)


@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
def create_provider(
    data: ProviderCreate,
    ctx: UserContext = Depends(manage_npis),
    session: Session = Depends(get_session),
):
    """Register an NPI for a customer."""
    scope = require_scope(ctx)

    if scope.customer_id is not None:
        if data.customer_id and data.customer_id != scope.customer_id:
            raise HTTPException(status_code=403, detail="Cannot create NPIs for other customers")
        customer_id = scope.customer_id
    else:
        if not data.customer_id:
            raise HTTPException(status_code=400, detail="customer_id is required")
        if not session.get(Customer, data.customer_id):
            raise HTTPException(status_code=404, detail="Customer not found")
        customer_id = data.customer_id

    # Provider group admins always create inside their own group
    provider_group_id = data.provider_group_id
    if scope.provider_group_id is not None:
        provider_group_id = provider_group_id or scope.provider_group_id
    if provider_group_id:
        _check_group_assignment(session, ctx, provider_group_id, customer_id)

    if crud.get_provider_by_npi(session, data.npi):
        raise HTTPException(status_code=400, detail="This NPI is already registered")

    return crud.create_provider(session, data.npi, data.name, customer_id, provider_group_id)


@router.get("/{provider_id}", response_model=ProviderResponse)
def get_provider(
    provider_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Get NPI details."""
    return _get_managed_provider(session, ctx, provider_id)


@router.patch("/{provider_id}", response_model=ProviderResponse)
def update_provider(
    provider_id: str,
    data: ProviderUpdate,
    ctx: UserContext = Depends(manage_npis),
    session: Session = Depends(get_session),
):
    """Update an NPI's name or active flag."""
    provider = _get_managed_provider(session, ctx, provider_id)
    return crud.update_provider(session, provider, data.model_dump(exclude_unset=True))


@router.put("/{provider_id}/group", response_model=ProviderResponse)
def assign_provider_group(
    provider_id: str,
    data: ProviderGroupAssignment,
    ctx: UserContext = Depends(manage_npis),
    session: Session = Depends(get_session),
):
    """Move an NPI into a provider group, or out of any group."""
    provider = _get_managed_provider(session, ctx, provider_id)
    _check_group_assignment(session, ctx, data.provider_group_id, provider.customer_id)
    return crud.assign_provider_group(session, provider, data.provider_group_id)


@router.delete("/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_provider(
    provider_id: str,
    ctx: UserContext = Depends(manage_npis),
    session: Session = Depends(get_session),
):
    """Delete an NPI that has no submissions."""
    provider = _get_managed_provider(session, ctx, provider_id)

    if crud.count_submissions(session, provider):
        raise HTTPException(status_code=400, detail="Cannot delete an NPI with submissions")

    crud.delete_provider(session, provider)
