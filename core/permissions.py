"""
Centralized submission permission definitions.
Capabilities are a static lookup per role name, not stored in the database.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional

from core.roles import RoleName


class PermissionScope(str, Enum):
    SYSTEM = "system"                  # Everything across all customers
    CUSTOMER = "customer"              # All provider groups within one customer
    PROVIDER_GROUP = "provider-group"  # Only the assigned provider group
    USER = "user"                      # No management capabilities
    NONE = "none"


# Submission type codes a role may create or view
SUBMISSION_TYPES = (
    "ADR",
    "PA_ABT",
    "PA_DMEPOS",
    "HH_PRE_CLAIM",
    "HOPD",
    "PWK",
    "FIRST_APPEAL",
    "SECOND_APPEAL",
    "DME_DISCUSSION",
    "RA_DISCUSSION",
    "ADMC",
    "IRF",
)


@dataclass
class SubmissionPermissions:
    can_create: list[str] = field(default_factory=list)
    can_view: list[str] = field(default_factory=list)
    can_manage_users: bool = False
    can_manage_npis: bool = False
    can_manage_provider_groups: bool = False
    can_manage_customers: Optional[bool] = None  # Only set for system admins
    scope: PermissionScope = PermissionScope.NONE

    def as_dict(self) -> dict:
        data = asdict(self)
        if self.can_manage_customers is None:
            data.pop("can_manage_customers")
        data["scope"] = self.scope.value
        return data


def get_submission_permissions(role_name: RoleName | str) -> SubmissionPermissions:
    """Get submission and management capabilities for a single role."""
    role = role_name.value if isinstance(role_name, RoleName) else role_name

    if role == RoleName.SYSTEM_ADMIN.value:
        return SubmissionPermissions(
            can_create=list(SUBMISSION_TYPES),
            can_view=list(SUBMISSION_TYPES),
            can_manage_users=True,
            can_manage_npis=True,
            can_manage_provider_groups=True,
            can_manage_customers=True,
            scope=PermissionScope.SYSTEM,
        )

    if role == RoleName.CUSTOMER_ADMIN.value:
        return SubmissionPermissions(
            can_create=list(SUBMISSION_TYPES),
            can_view=list(SUBMISSION_TYPES),
            can_manage_users=True,
            can_manage_npis=True,
            can_manage_provider_groups=True,
            scope=PermissionScope.CUSTOMER,
        )

    if role == RoleName.PROVIDER_GROUP_ADMIN.value:
        return SubmissionPermissions(
            can_create=list(SUBMISSION_TYPES),
            can_view=list(SUBMISSION_TYPES),
            can_manage_users=True,
            can_manage_npis=True,
            can_manage_provider_groups=False,
            scope=PermissionScope.PROVIDER_GROUP,
        )

    if role == RoleName.BASIC_USER.value:
        return SubmissionPermissions(
            can_create=list(SUBMISSION_TYPES),
            can_view=list(SUBMISSION_TYPES),
            scope=PermissionScope.USER,
        )

    return SubmissionPermissions()
