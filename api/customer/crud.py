from datetime import datetime
from typing import Optional
from sqlmodel import Session, select, func

from database.models import Customer
from api.customer.schemas import CustomerCreate, CustomerUpdate


def create_customer(session: Session, data: CustomerCreate) -> Customer:
    """Create a new customer organization. Does not commit."""
    customer = Customer(
        name=data.name,
        description=data.description,
        baa_number=data.baa_number or None,
        baa_date=data.baa_date,
    )
    session.add(customer)
    session.flush()
    return customer


def get_customer(session: Session, customer_id: str) -> Optional[Customer]:
    """Get customer by ID."""
    return session.get(Customer, customer_id)


def get_customer_by_baa(session: Session, baa_number: str) -> Optional[Customer]:
    """Get customer by Business Associate Agreement number."""
    return session.exec(select(Customer).where(Customer.baa_number == baa_number)).first()


def _search(statement, search: Optional[str]):
    if search:
        pattern = f"%{search}%"
        statement = statement.where(
            (Customer.name.ilike(pattern))
            | (Customer.description.ilike(pattern))
            | (Customer.baa_number.ilike(pattern))
        )
    return statement


def get_customers(
    session: Session,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> list[Customer]:
    """Get customers with optional search and pagination."""
    return list(session.exec(
        _search(select(Customer), search)
        .order_by(Customer.name)
        .offset(skip)
        .limit(limit)
    ).all())


def count_customers(session: Session, search: Optional[str] = None) -> int:
    return session.exec(_search(select(func.count(Customer.id)), search)).one()


def update_customer(session: Session, customer: Customer, data: CustomerUpdate) -> Customer:
    """Update customer details."""
    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(customer, key, value)
    customer.updated_at = datetime.utcnow()
    session.add(customer)
    session.commit()
    session.refresh(customer)
    return customer
