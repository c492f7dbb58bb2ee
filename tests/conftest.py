"""Shared fixtures for the Interex admin API tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import database.models  # noqa: F401
from auth import hash_password, issue_token, set_user_roles
from core.roles import RoleName
from database.connection import get_session
from database.models import Customer, Provider, ProviderGroup, User
from database.seed import seed_roles
from main import app


@pytest.fixture
def session():
    """Fresh in-memory database with the canonical roles seeded."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_roles(session)
        session.commit()
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(session):
    """Test client whose requests share the test session."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_customer(session):
    def _make(name: str = "Acme Health", baa_number: str | None = None) -> Customer:
        customer = Customer(name=name, baa_number=baa_number)
        session.add(customer)
        session.commit()
        session.refresh(customer)
        return customer

    return _make


@pytest.fixture
def make_group(session):
    def _make(customer: Customer, name: str = "North Clinic") -> ProviderGroup:
        group = ProviderGroup(customer_id=customer.id, name=name)
        session.add(group)
        session.commit()
        session.refresh(group)
        return group

    return _make


@pytest.fixture
def make_provider(session):
    def _make(
        customer: Customer,
        npi: str,
        group: ProviderGroup | None = None,
        active: bool = True,
    ) -> Provider:
        provider = Provider(
            npi=npi,
            name=f"Provider {npi}",
            customer_id=customer.id,
            provider_group_id=group.id if group else None,
            active=active,
        )
        session.add(provider)
        session.commit()
        session.refresh(provider)
        return provider

    return _make


@pytest.fixture
def make_user(session):
    def _make(
        username: str,
        roles: list[RoleName | str],
        customer: Customer | None = None,
        group: ProviderGroup | None = None,
        password: str | None = None,
        active: bool = True,
    ) -> User:
        user = User(
            email=f"{username}@example.com",
            username=username,
            name=username.replace("_", " ").title(),
            customer_id=customer.id if customer else None,
            provider_group_id=group.id if group else None,
            password_hash=hash_password(password) if password else None,
            active=active,
        )
        session.add(user)
        session.flush()
        set_user_roles(session, user, [r.value if isinstance(r, RoleName) else r for r in roles])
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(user.id, user.username)}"}

    return _headers


@pytest.fixture
def org(make_customer, make_group, make_user):
    """One customer with two provider groups and an admin at every level."""
    customer = make_customer()
    north = make_group(customer, "North Clinic")
    south = make_group(customer, "South Clinic")

    return SimpleNamespace(
        customer=customer,
        north=north,
        south=south,
        system_admin=make_user("sysadmin", [RoleName.SYSTEM_ADMIN]),
        customer_admin=make_user("custadmin", [RoleName.CUSTOMER_ADMIN], customer),
        north_admin=make_user("north_admin", [RoleName.PROVIDER_GROUP_ADMIN], customer, north),
        south_admin=make_user("south_admin", [RoleName.PROVIDER_GROUP_ADMIN], customer, south),
        north_user=make_user("north_user", [RoleName.BASIC_USER], customer, north),
    )
