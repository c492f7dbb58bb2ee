"""
Role hierarchy for the Interex portal.
Roles are identified by name; authority is a fixed total order where a
lower level means more authority.
"""
from enum import Enum
from typing import Iterable, Optional


class RoleName(str, Enum):
    SYSTEM_ADMIN = "system-admin"                  # Interex staff - all customers
    CUSTOMER_ADMIN = "customer-admin"              # Manages one customer organization
    PROVIDER_GROUP_ADMIN = "provider-group-admin"  # Manages one provider group
    BASIC_USER = "basic-user"                      # Works with assigned NPIs only


ROLE_LEVELS = {
    RoleName.SYSTEM_ADMIN.value: 0,
    RoleName.CUSTOMER_ADMIN.value: 1,
    RoleName.PROVIDER_GROUP_ADMIN.value: 2,
    RoleName.BASIC_USER.value: 3,
}

# Unknown role names sort after every canonical role
UNKNOWN_ROLE_LEVEL = 999

# Landing page per primary role
DASHBOARD_URLS = {
    RoleName.SYSTEM_ADMIN.value: "/admin/dashboard",
    RoleName.CUSTOMER_ADMIN.value: "/customer",
    RoleName.PROVIDER_GROUP_ADMIN.value: "/provider",
    RoleName.BASIC_USER.value: "/customer/submissions",
}

ROLE_DESCRIPTIONS = {
    RoleName.SYSTEM_ADMIN.value: "System Administrator with capability to add new customers",
    RoleName.CUSTOMER_ADMIN.value: "Customer Administrator with full access to customer organization",
    RoleName.PROVIDER_GROUP_ADMIN.value: "Provider Group Administrator with access to their provider group",
    RoleName.BASIC_USER.value: "Basic user with access to assigned NPIs only",
}


def _role_value(role: RoleName | str) -> str:
    return role.value if isinstance(role, RoleName) else role


def get_role_level(role_name: RoleName | str) -> int:
    """Get the hierarchy level of a role (lower number = higher authority)."""
    return ROLE_LEVELS.get(_role_value(role_name), UNKNOWN_ROLE_LEVEL)


def has_role_authority(user_role: RoleName | str, required_role: RoleName | str) -> bool:
    """Check if user_role has equal or higher authority than required_role."""
    return get_role_level(user_role) <= get_role_level(required_role)


def is_interex_user(roles: Iterable[str]) -> bool:
    """Check if any of the roles is a canonical Interex role."""
    return any(_role_value(role) in ROLE_LEVELS for role in roles)


def get_highest_authority_role(roles: Iterable[RoleName | str]) -> Optional[str]:
    """Return the role with the most authority, or None for no roles.

    Ties keep the first occurrence, so among several unknown names the
    leftmost one is returned.
    """
    highest = None
    for role in roles:
        name = _role_value(role)
        if highest is None or get_role_level(name) < get_role_level(highest):
            highest = name
    return highest


def can_manage_user(manager_roles: Iterable[str], target_roles: Iterable[str]) -> bool:
    """Check if a manager strictly outranks the target user.

    Equal authority cannot manage, and either side holding no role at all
    means no management is possible.
    """
    manager_highest = get_highest_authority_role(manager_roles)
    target_highest = get_highest_authority_role(target_roles)

    if manager_highest is None or target_highest is None:
        return False

    return get_role_level(manager_highest) < get_role_level(target_highest)


def get_primary_role(roles: Iterable[str]) -> str:
    """Get the highest canonical role held, defaulting to basic-user."""
    names = {_role_value(role) for role in roles}
    for role in RoleName:
        if role.value in names:
            return role.value
    return RoleName.BASIC_USER.value


def get_dashboard_url(roles: Iterable[str]) -> str:
    """Get the dashboard path for a user based on their primary role."""
    return DASHBOARD_URLS.get(get_primary_role(roles), "/")


def has_role_access(roles: Iterable[str], required_roles: Iterable[RoleName | str]) -> bool:
    """Check if any held role is among the required roles."""
    names = {_role_value(role) for role in roles}
    return any(_role_value(role) in names for role in required_roles)
