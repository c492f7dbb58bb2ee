from datetime import datetime
from typing import Optional
from sqlmodel import Session, select, func
from sqlalchemy import delete

from database.models import Provider, UserNpi, Submission, User
from database.scoping import scope_providers
from core.scope import ScopeFilter


def get_provider(session: Session, provider_id: str) -> Optional[Provider]:
    return session.get(Provider, provider_id)


def get_provider_by_npi(session: Session, npi: str) -> Optional[Provider]:
    return session.exec(select(Provider).where(Provider.npi == npi)).first()


def _filtered(statement, scope: ScopeFilter, search: Optional[str]):
    statement = scope_providers(statement, scope)
    if search:
        pattern = f"%{search}%"
        statement = statement.where((Provider.npi.ilike(pattern)) | (Provider.name.ilike(pattern)))
    return statement


def get_providers(
    session: Session,
    scope: ScopeFilter,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> list[Provider]:
    """Get NPIs visible within a scope."""
    return list(session.exec(
        _filtered(select(Provider), scope, search)
        .order_by(Provider.npi)
        .offset(skip)
        .limit(limit)
    ).all())


def count_providers(session: Session, scope: ScopeFilter, search: Optional[str] = None) -> int:
    return session.exec(_filtered(select(func.count(Provider.id)), scope, search)).one()


def create_provider(
    session: Session,
    npi: str,
    name: Optional[str],
    customer_id: str,
    provider_group_id: Optional[str] = None,
) -> Provider:
    provider = Provider(
        npi=npi,
        name=name,
        customer_id=customer_id,
        provider_group_id=provider_group_id,
    )
    session.add(provider)
    session.commit()
    session.refresh(provider)
    return provider


def update_provider(session: Session, provider: Provider, update_data: dict) -> Provider:
    for key, value in update_data.items():
        setattr(provider, key, value)
    provider.updated_at = datetime.utcnow()
    session.add(provider)
    session.commit()
    session.refresh(provider)
    return provider


def count_submissions(session: Session, provider: Provider) -> int:
    return session.exec(
        select(func.count(Submission.id)).where(Submission.provider_id == provider.id)
    ).one()


def delete_provider(session: Session, provider: Provider) -> None:
    """Delete an NPI and its user assignments."""
    session.execute(delete(UserNpi).where(UserNpi.provider_id == provider.id))
    session.delete(provider)
    session.commit()


def assign_provider_group(session: Session, provider: Provider, provider_group_id: Optional[str]) -> Provider:
    """Move an NPI between groups, dropping assignments held by users of other groups.

    Users without a group keep their assignments; they may hold any NPI of
    their customer.
    """
    stale_users = select(User.id).where(User.provider_group_id.is_not(None))
    if provider_group_id:
        stale_users = stale_users.where(User.provider_group_id != provider_group_id)
    session.execute(
        delete(UserNpi)
        .where(UserNpi.provider_id == provider.id, UserNpi.user_id.in_(stale_users))
        .execution_options(synchronize_session="fetch")
    )
    return update_provider(session, provider, {"provider_group_id": provider_group_id})
