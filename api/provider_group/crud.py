from datetime import datetime
from typing import Optional
from sqlmodel import Session, select, func

from database.models import ProviderGroup, Provider, User
from database.scoping import scope_provider_groups
from core.scope import ScopeFilter


def get_provider_group(session: Session, provider_group_id: str) -> Optional[ProviderGroup]:
    return session.get(ProviderGroup, provider_group_id)


def get_provider_group_by_name(session: Session, customer_id: str, name: str) -> Optional[ProviderGroup]:
    """Get provider group by name within a customer."""
    return session.exec(
        select(ProviderGroup).where(
            ProviderGroup.customer_id == customer_id,
            ProviderGroup.name == name,
        )
    ).first()


def _filtered(statement, scope: ScopeFilter, customer_id: Optional[str]):
    statement = scope_provider_groups(statement, scope)
    if customer_id:
        statement = statement.where(ProviderGroup.customer_id == customer_id)
    return statement


def get_provider_groups(
    session: Session,
    scope: ScopeFilter,
    customer_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> list[ProviderGroup]:
    """Get provider groups visible within a scope."""
    return list(session.exec(
        _filtered(select(ProviderGroup), scope, customer_id)
        .order_by(ProviderGroup.name)
        .offset(skip)
        .limit(limit)
    ).all())


def count_provider_groups(session: Session, scope: ScopeFilter, customer_id: Optional[str] = None) -> int:
    return session.exec(_filtered(select(func.count(ProviderGroup.id)), scope, customer_id)).one()


def count_members(session: Session, provider_group_id: str) -> tuple[int, int]:
    """Count users and NPIs attached to a provider group."""
    users = session.exec(
        select(func.count(User.id)).where(User.provider_group_id == provider_group_id)
    ).one()
    providers = session.exec(
        select(func.count(Provider.id)).where(Provider.provider_group_id == provider_group_id)
    ).one()
    return users, providers


def create_provider_group(
    session: Session,
    customer_id: str,
    name: str,
    description: str = "",
) -> ProviderGroup:
    group = ProviderGroup(customer_id=customer_id, name=name, description=description)
    session.add(group)
    session.commit()
    session.refresh(group)
    return group


def update_provider_group(session: Session, group: ProviderGroup, update_data: dict) -> ProviderGroup:
    for key, value in update_data.items():
        setattr(group, key, value)
    group.updated_at = datetime.utcnow()
    session.add(group)
    session.commit()
    session.refresh(group)
    return group


def delete_provider_group(session: Session, group: ProviderGroup) -> None:
    session.delete(group)
    session.commit()


def to_response(session: Session, group: ProviderGroup) -> dict:
    users, providers = count_members(session, group.id)
    return {
        **group.model_dump(),
        "user_count": users,
        "provider_count": providers,
    }
