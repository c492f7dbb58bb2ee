from datetime import datetime
from sqlmodel import Session, select, or_
from sqlalchemy import delete

from database.models import User, Role, UserRole
from auth.passwords import verify_password
from utils.logger import get_logger

logger = get_logger(__name__)


def get_user_by_login(session: Session, login: str) -> User | None:
    """Find user by username or email."""
    return session.exec(
        select(User).where(or_(User.username == login, User.email == login))
    ).first()


def authenticate_user(session: Session, login: str, password: str) -> User | None:
    """Verify credentials and record the login.

    Returns None for unknown users, wrong passwords and deactivated accounts.
    """
    user = get_user_by_login(session, login)
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Failed login attempt for '{login}'")
        return None

    if not user.active:
        logger.info(f"Login refused for deactivated user {user.id}")
        return None

    user.last_login_at = datetime.utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def get_user_roles(session: Session, user: User) -> list[str]:
    """Get the role names currently held by a user."""
    results = session.exec(
        select(Role.name)
        .join(UserRole, UserRole.role_id == Role.id)
        .where(UserRole.user_id == user.id)
    ).all()
    return list(results)


def set_user_roles(session: Session, user: User, role_names: list[str]) -> None:
    """Replace a user's roles. Does not commit."""
    roles = session.exec(select(Role).where(Role.name.in_(role_names))).all()
    found = {role.name for role in roles}
    missing = set(role_names) - found
    if missing:
        raise ValueError(f"Unknown roles: {', '.join(sorted(missing))}")

    session.execute(delete(UserRole).where(UserRole.user_id == user.id))
    for role in roles:
        session.add(UserRole(user_id=user.id, role_id=role.id))
