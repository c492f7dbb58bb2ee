from typing import Optional
from datetime import datetime
from sqlmodel import Session, select, func
from sqlalchemy import delete, or_

from database.models import User, UserRole, UserNpi, Provider, ProviderGroup, Submission
from database.scoping import scope_users
from auth.service import get_user_roles, set_user_roles
from auth.passwords import hash_password, generate_temporary_password
from core.roles import RoleName
from core.scope import ScopeFilter
from utils.logger import get_logger

logger = get_logger(__name__)


def get_user(session: Session, user_id: str) -> Optional[User]:
    """Get user by ID."""
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def get_user_by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def get_users(
    session: Session,
    scope: ScopeFilter,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> list[User]:
    """Get users visible within a scope."""
    statement = scope_users(select(User), scope)
    if search:
        pattern = f"%{search}%"
        statement = statement.where(
            (User.name.ilike(pattern)) | (User.email.ilike(pattern)) | (User.username.ilike(pattern))
        )
    return list(session.exec(
        statement.order_by(User.created_at).offset(skip).limit(limit)
    ).all())


def count_users(session: Session, scope: ScopeFilter) -> int:
    return session.exec(scope_users(select(func.count(User.id)), scope)).one()


def get_provider_group_for_customer(
    session: Session,
    provider_group_id: str,
    customer_id: Optional[str],
) -> Optional[ProviderGroup]:
    """Get a provider group only if it belongs to the given customer."""
    group = session.get(ProviderGroup, provider_group_id)
    if not group or group.customer_id != customer_id:
        return None
    return group


def drop_npis_outside_group(session: Session, user_id: str, provider_group_id: str) -> None:
    """Remove a user's NPI assignments that are not in the given group. Does not commit."""
    outside = select(Provider.id).where(
        or_(Provider.provider_group_id.is_(None), Provider.provider_group_id != provider_group_id)
    )
    session.execute(
        delete(UserNpi)
        .where(UserNpi.user_id == user_id, UserNpi.provider_id.in_(outside))
        .execution_options(synchronize_session="fetch")
    )


def count_created_submissions(session: Session, user: User) -> int:
    return session.exec(
        select(func.count(Submission.id)).where(Submission.creator_id == user.id)
    ).one()


def create_user(
    session: Session,
    email: str,
    username: str,
    name: Optional[str],
    role_name: str,
    customer_id: Optional[str],
    provider_group_id: Optional[str] = None,
) -> tuple[User, str]:
    """Create a user with a temporary password.

    Returns the user and the plain temporary password, which is not stored.
    """
    temporary_password = generate_temporary_password()
    user = User(
        email=email,
        username=username,
        name=name,
        customer_id=customer_id,
        provider_group_id=provider_group_id,
        password_hash=hash_password(temporary_password),
    )
    session.add(user)
    session.flush()
    set_user_roles(session, user, [role_name])
    session.commit()
    session.refresh(user)
    logger.info(f"Created user {user.username} with role {role_name}")
    return user, temporary_password


def update_user(
    session: Session,
    user: User,
    update_data: dict,
    role_name: Optional[str] = None,
) -> User:
    """Apply field updates and optionally replace the user's role.

    NPI assignments that no longer fit the user are dropped: all of them when
    the role leaves basic-user, and those outside a newly assigned group.
    """
    for key, value in update_data.items():
        setattr(user, key, value)
    if role_name is not None:
        set_user_roles(session, user, [role_name])
        if role_name != RoleName.BASIC_USER.value:
            session.execute(delete(UserNpi).where(UserNpi.user_id == user.id))
    if update_data.get("provider_group_id"):
        drop_npis_outside_group(session, user.id, update_data["provider_group_id"])
    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def update_user_status(session: Session, user: User, active: bool) -> User:
    """Update user's active status."""
    user.active = active
    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def delete_user(session: Session, user: User) -> None:
    """Delete a user along with role and NPI assignments."""
    session.execute(delete(UserNpi).where(UserNpi.user_id == user.id))
    session.execute(delete(UserRole).where(UserRole.user_id == user.id))
    session.delete(user)
    session.commit()


def get_user_npis(session: Session, user: User) -> list[Provider]:
    """Get the NPIs assigned to a user."""
    return list(session.exec(
        select(Provider)
        .join(UserNpi, UserNpi.provider_id == Provider.id)
        .where(UserNpi.user_id == user.id)
        .order_by(Provider.npi)
    ).all())


def find_invalid_npis(session: Session, user: User, provider_ids: list[str]) -> list[str]:
    """Return the requested provider ids that cannot be assigned to the user.

    Assignable NPIs are active and belong to the user's customer, and to the
    user's provider group when the user has one.
    """
    if not provider_ids:
        return []

    statement = select(Provider.id).where(
        Provider.id.in_(provider_ids),
        Provider.customer_id == user.customer_id,
        Provider.active == True,  # noqa: E712
    )
    if user.provider_group_id:
        statement = statement.where(Provider.provider_group_id == user.provider_group_id)

    valid = set(session.exec(statement).all())
    return [provider_id for provider_id in provider_ids if provider_id not in valid]


def replace_user_npis(session: Session, user: User, provider_ids: list[str]) -> list[Provider]:
    """Replace a user's NPI assignments."""
    session.execute(delete(UserNpi).where(UserNpi.user_id == user.id))
    for provider_id in dict.fromkeys(provider_ids):
        session.add(UserNpi(user_id=user.id, provider_id=provider_id))
    session.commit()
    return get_user_npis(session, user)


def user_to_response(session: Session, user: User) -> dict:
    """Get user fields together with role names."""
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "name": user.name,
        "active": user.active,
        "customer_id": user.customer_id,
        "provider_group_id": user.provider_group_id,
        "last_login_at": user.last_login_at,
        "created_at": user.created_at,
        "roles": get_user_roles(session, user),
    }
