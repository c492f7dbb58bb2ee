"""
Database seeding script for roles and the bootstrap administrator.
Run this after database tables are created.
"""
from datetime import datetime
from sqlmodel import Session, select
from database.connection import get_db_session
from database.models import Role, User, UserRole
from core.roles import RoleName, ROLE_DESCRIPTIONS
from auth.passwords import hash_password
from config.settings import (
    BOOTSTRAP_ADMIN_EMAIL,
    BOOTSTRAP_ADMIN_USERNAME,
    BOOTSTRAP_ADMIN_PASSWORD,
)
from utils.logger import get_logger

logger = get_logger(__name__)


# Define roles (using .value to store as strings in DB)
ROLES = [
    {"name": role.value, "description": ROLE_DESCRIPTIONS[role.value], "active": True}
    for role in RoleName
]


def seed_roles(session: Session) -> dict[str, Role]:
    """Upsert the canonical roles and return them keyed by name."""
    role_map = {}
    for role_data in ROLES:
        existing = session.exec(
            select(Role).where(Role.name == role_data["name"])
        ).first()

        if existing:
            existing.description = role_data["description"]
            existing.active = role_data["active"]
            existing.updated_at = datetime.utcnow()
            session.add(existing)
            role_map[role_data["name"]] = existing
        else:
            role = Role(**role_data)
            session.add(role)
            session.flush()
            role_map[role_data["name"]] = role

    return role_map


def seed_bootstrap_admin(session: Session, role_map: dict[str, Role]) -> User | None:
    """Create the first system administrator when configured and missing."""
    if not BOOTSTRAP_ADMIN_EMAIL or not BOOTSTRAP_ADMIN_PASSWORD:
        return None

    existing = session.exec(
        select(User).where(User.email == BOOTSTRAP_ADMIN_EMAIL)
    ).first()
    if existing:
        return existing

    admin = User(
        email=BOOTSTRAP_ADMIN_EMAIL,
        username=BOOTSTRAP_ADMIN_USERNAME,
        name="System Administrator",
        password_hash=hash_password(BOOTSTRAP_ADMIN_PASSWORD),
    )
    session.add(admin)
    session.flush()
    session.add(UserRole(user_id=admin.id, role_id=role_map[RoleName.SYSTEM_ADMIN.value].id))
    logger.info(f"Bootstrap system administrator created: {admin.username}")
    return admin


def seed_database():
    """Seed roles and the bootstrap administrator into the database."""
    with get_db_session() as session:
        role_map = seed_roles(session)
        seed_bootstrap_admin(session, role_map)
        session.commit()
        logger.info("Database seeded with Interex roles")


if __name__ == "__main__":
    seed_database()
