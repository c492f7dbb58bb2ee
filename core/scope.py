"""
Data-visibility scoping for management queries.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from core.roles import RoleName


@dataclass(frozen=True)
class ScopeFilter:
    """Records a caller may touch.

    ScopeFilter() with no fields set means no restriction. A missing filter
    (None) means no access and must never be read as "no restriction".
    """
    customer_id: Optional[str] = None
    provider_group_id: Optional[str] = None

    @property
    def is_unrestricted(self) -> bool:
        return self.customer_id is None and self.provider_group_id is None

    def as_dict(self) -> dict:
        data = {}
        if self.customer_id is not None:
            data["customer_id"] = self.customer_id
        if self.provider_group_id is not None:
            data["provider_group_id"] = self.provider_group_id
        return data


def get_scope_filter(
    user_roles: Iterable[str],
    user_provider_group_id: Optional[str],
    customer_id: Optional[str],
) -> Optional[ScopeFilter]:
    """Get the scope filter for database queries based on role and provider group."""
    role_names = set(user_roles)

    if RoleName.SYSTEM_ADMIN.value in role_names:
        return ScopeFilter()

    # Admin roles without their affiliation get nothing; an empty filter
    # would read as unrestricted
    if RoleName.CUSTOMER_ADMIN.value in role_names and customer_id is not None:
        return ScopeFilter(customer_id=customer_id)

    if RoleName.PROVIDER_GROUP_ADMIN.value in role_names and user_provider_group_id is not None:
        return ScopeFilter(customer_id=customer_id, provider_group_id=user_provider_group_id)

    return None


def can_manage_provider_group(
    user_roles: Iterable[str],
    user_provider_group_id: Optional[str],
    target_provider_group_id: Optional[str],
) -> bool:
    """Check if a user can manage resources within a provider group.

    Customer admins are not matched against the group's customer here;
    callers must already have filtered by customer.
    """
    role_names = set(user_roles)

    if RoleName.SYSTEM_ADMIN.value in role_names:
        return True

    if RoleName.CUSTOMER_ADMIN.value in role_names:
        return True

    if RoleName.PROVIDER_GROUP_ADMIN.value in role_names:
        return user_provider_group_id == target_provider_group_id

    return False
