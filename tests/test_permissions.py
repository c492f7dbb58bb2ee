"""Tests for the per-role submission permission table."""

from __future__ import annotations

import pytest

from core.permissions import (
    SUBMISSION_TYPES,
    PermissionScope,
    get_submission_permissions,
)
from core.roles import RoleName


def test_submission_types_are_the_twelve_canonical_codes():
    assert len(SUBMISSION_TYPES) == 12
    assert len(set(SUBMISSION_TYPES)) == 12
    assert "IRF" in SUBMISSION_TYPES
    assert "HH_PRE_CLAIM" in SUBMISSION_TYPES


@pytest.mark.parametrize(
    "role, users, npis, groups, scope",
    [
        (RoleName.SYSTEM_ADMIN, True, True, True, PermissionScope.SYSTEM),
        (RoleName.CUSTOMER_ADMIN, True, True, True, PermissionScope.CUSTOMER),
        (RoleName.PROVIDER_GROUP_ADMIN, True, True, False, PermissionScope.PROVIDER_GROUP),
        (RoleName.BASIC_USER, False, False, False, PermissionScope.USER),
    ],
)
def test_canonical_role_rows(role, users, npis, groups, scope):
    perms = get_submission_permissions(role)

    assert perms.can_create == list(SUBMISSION_TYPES)
    assert perms.can_view == list(SUBMISSION_TYPES)
    assert perms.can_manage_users is users
    assert perms.can_manage_npis is npis
    assert perms.can_manage_provider_groups is groups
    assert perms.scope is scope


def test_only_system_admin_carries_customer_management():
    assert get_submission_permissions(RoleName.SYSTEM_ADMIN).can_manage_customers is True
    for role in (RoleName.CUSTOMER_ADMIN, RoleName.PROVIDER_GROUP_ADMIN, RoleName.BASIC_USER):
        assert get_submission_permissions(role).can_manage_customers is None


def test_unknown_role_gets_nothing():
    perms = get_submission_permissions("auditor")

    assert perms.can_create == []
    assert perms.can_view == []
    assert not perms.can_manage_users
    assert not perms.can_manage_npis
    assert not perms.can_manage_provider_groups
    assert perms.can_manage_customers is None
    assert perms.scope is PermissionScope.NONE


def test_accepts_plain_strings():
    assert get_submission_permissions("customer-admin").scope is PermissionScope.CUSTOMER


def test_as_dict_omits_absent_customer_management():
    data = get_submission_permissions(RoleName.CUSTOMER_ADMIN).as_dict()

    assert "can_manage_customers" not in data
    assert data["scope"] == "customer"


def test_as_dict_keeps_customer_management_for_system_admin():
    data = get_submission_permissions(RoleName.SYSTEM_ADMIN).as_dict()

    assert data["can_manage_customers"] is True
    assert data["scope"] == "system"


def test_each_call_returns_fresh_lists():
    first = get_submission_permissions(RoleName.BASIC_USER)
    first.can_create.clear()
    first.can_view.append("BOGUS")

    second = get_submission_permissions(RoleName.BASIC_USER)
    assert second.can_create == list(SUBMISSION_TYPES)
    assert "BOGUS" not in second.can_view
