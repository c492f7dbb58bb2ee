from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from api.customer import crud
from api.customer.schemas import (
    CustomerAdminCreate,
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerCreatedResponse,
    CustomerListResponse,
)
from api.user import crud as user_crud
from api.user.schemas import UserCreatedResponse
from auth import UserContext, get_user_context, require_roles
from core.roles import RoleName
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

system_admin_only = require_roles(RoleName.SYSTEM_ADMIN)


def _check_new_admin(session: Session, admin: CustomerAdminCreate) -> None:
    if user_crud.get_user_by_email(session, admin.email):
        raise HTTPException(status_code=400, detail="Email already exists")
    if user_crud.get_user_by_username(session, admin.username):
        raise HTTPException(status_code=400, detail="Username already exists")


def _create_admin(session: Session, customer_id: str, admin: CustomerAdminCreate) -> dict:
    user, temporary_password = user_crud.create_user(
        session,
        email=admin.email,
        username=admin.username,
        name=admin.name,
        role_name=RoleName.CUSTOMER_ADMIN.value,
        customer_id=customer_id,
    )
    return {**user_crud.user_to_response(session, user), "temporary_password": temporary_password}


@router.post("", response_model=CustomerCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    data: CustomerCreate,
    ctx: UserContext = Depends(system_admin_only),
    session: Session = Depends(get_session),
):
    """Create a customer, optionally with its first customer administrator."""
    if data.baa_number and crud.get_customer_by_baa(session, data.baa_number):
        raise HTTPException(status_code=400, detail="A customer with this BAA number already exists")

    if data.admin:
        _check_new_admin(session, data.admin)

    customer = crud.create_customer(session, data)
    admin = _create_admin(session, customer.id, data.admin) if data.admin else None
    session.commit()
    session.refresh(customer)

    logger.info(f"Customer {customer.name} created by {ctx.user.username}")
    return CustomerCreatedResponse(
        customer=CustomerResponse.model_validate(customer),
        admin=admin,
    )


@router.get("", response_model=CustomerListResponse)
def list_customers(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    ctx: UserContext = Depends(system_admin_only),
    session: Session = Depends(get_session),
):
    """List customers with optional search."""
    customers = crud.get_customers(session, search, skip, limit)
    total = crud.count_customers(session, search)
    return CustomerListResponse(customers=customers, total=total)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Get customer details. Non-system users may only view their own customer."""
    if not ctx.has_role(RoleName.SYSTEM_ADMIN) and ctx.user.customer_id != customer_id:
        raise HTTPException(status_code=403, detail="Access denied")

    customer = crud.get_customer(session, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    ctx: UserContext = Depends(system_admin_only),
    session: Session = Depends(get_session),
):
    """Update customer details."""
    customer = crud.get_customer(session, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    if data.baa_number and data.baa_number != customer.baa_number:
        if crud.get_customer_by_baa(session, data.baa_number):
            raise HTTPException(status_code=400, detail="A customer with this BAA number already exists")

    return crud.update_customer(session, customer, data)


@router.post("/{customer_id}/admins", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def add_customer_admin(
    customer_id: str,
    data: CustomerAdminCreate,
    ctx: UserContext = Depends(system_admin_only),
    session: Session = Depends(get_session),
):
    """Add a customer administrator to an existing customer."""
    if not crud.get_customer(session, customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")

    _check_new_admin(session, data)
    return _create_admin(session, customer_id, data)
