"""Tests for the role hierarchy and authority comparisons."""

from __future__ import annotations

import pytest

from core.roles import (
    DASHBOARD_URLS,
    UNKNOWN_ROLE_LEVEL,
    RoleName,
    can_manage_user,
    get_dashboard_url,
    get_highest_authority_role,
    get_primary_role,
    get_role_level,
    has_role_access,
    has_role_authority,
    is_interex_user,
)

SYSTEM = RoleName.SYSTEM_ADMIN.value
CUSTOMER = RoleName.CUSTOMER_ADMIN.value
GROUP = RoleName.PROVIDER_GROUP_ADMIN.value
BASIC = RoleName.BASIC_USER.value


class TestRoleLevel:
    @pytest.mark.parametrize(
        "role, level",
        [(SYSTEM, 0), (CUSTOMER, 1), (GROUP, 2), (BASIC, 3)],
    )
    def test_canonical_levels(self, role, level):
        assert get_role_level(role) == level

    def test_accepts_enum_members(self):
        assert get_role_level(RoleName.CUSTOMER_ADMIN) == 1

    def test_unknown_role_sorts_last(self):
        assert get_role_level("auditor") == UNKNOWN_ROLE_LEVEL == 999
        assert get_role_level("") == 999

    def test_role_names_are_case_sensitive(self):
        assert get_role_level("System-Admin") == 999


class TestHasRoleAuthority:
    def test_reflexive(self):
        for role in RoleName:
            assert has_role_authority(role, role)

    def test_higher_authority_covers_lower(self):
        assert has_role_authority(SYSTEM, BASIC)
        assert has_role_authority(CUSTOMER, GROUP)

    def test_lower_authority_does_not_cover_higher(self):
        assert not has_role_authority(BASIC, GROUP)
        assert not has_role_authority(GROUP, CUSTOMER)

    def test_unknown_roles_compare_equal(self):
        assert has_role_authority("foo", "bar")
        assert not has_role_authority("foo", BASIC)


class TestHighestAuthorityRole:
    def test_empty_is_none(self):
        assert get_highest_authority_role([]) is None

    def test_picks_minimum_rank(self):
        assert get_highest_authority_role([BASIC, CUSTOMER, GROUP]) == CUSTOMER

    def test_single_unknown_role_is_returned(self):
        assert get_highest_authority_role(["auditor"]) == "auditor"

    def test_canonical_beats_unknown(self):
        assert get_highest_authority_role(["auditor", BASIC]) == BASIC

    def test_first_unknown_wins_ties(self):
        assert get_highest_authority_role(["zeta", "alpha"]) == "zeta"

    def test_duplicates_tolerated(self):
        assert get_highest_authority_role([GROUP, GROUP, SYSTEM, SYSTEM]) == SYSTEM

    def test_accepts_generators(self):
        assert get_highest_authority_role(r for r in [BASIC, GROUP]) == GROUP


class TestCanManageUser:
    def test_strictly_higher_can_manage(self):
        assert can_manage_user([SYSTEM], [CUSTOMER])
        assert can_manage_user([CUSTOMER], [GROUP])
        assert can_manage_user([GROUP], [BASIC])

    def test_equal_authority_cannot_manage(self):
        for role in RoleName:
            assert not can_manage_user([role.value], [role.value])

    def test_lower_cannot_manage_higher(self):
        assert not can_manage_user([BASIC], [GROUP])

    def test_uses_highest_role_on_each_side(self):
        assert can_manage_user([BASIC, CUSTOMER], [GROUP, BASIC])
        assert not can_manage_user([GROUP], [BASIC, CUSTOMER])

    @pytest.mark.parametrize(
        "manager, target",
        [([], []), ([SYSTEM], []), ([], [BASIC])],
    )
    def test_empty_sides_cannot_manage(self, manager, target):
        assert not can_manage_user(manager, target)

    def test_canonical_role_manages_unknown_role(self):
        assert can_manage_user([BASIC], ["auditor"])
        assert not can_manage_user(["auditor"], ["other"])


class TestPrimaryRole:
    def test_highest_canonical_role(self):
        assert get_primary_role([BASIC, GROUP]) == GROUP

    def test_defaults_to_basic_user(self):
        assert get_primary_role([]) == BASIC
        assert get_primary_role(["auditor"]) == BASIC

    def test_ignores_unknown_roles(self):
        assert get_primary_role(["auditor", CUSTOMER]) == CUSTOMER


class TestDashboardAndAccess:
    def test_dashboard_per_primary_role(self):
        assert get_dashboard_url([SYSTEM]) == "/admin/dashboard"
        assert get_dashboard_url([CUSTOMER, BASIC]) == "/customer"
        assert get_dashboard_url([GROUP]) == "/provider"
        assert get_dashboard_url([]) == DASHBOARD_URLS[BASIC] == "/customer/submissions"

    def test_is_interex_user(self):
        assert is_interex_user([BASIC])
        assert is_interex_user(["auditor", GROUP])
        assert not is_interex_user(["auditor"])
        assert not is_interex_user([])

    def test_has_role_access_is_any_overlap(self):
        assert has_role_access([GROUP, BASIC], [RoleName.SYSTEM_ADMIN, RoleName.BASIC_USER])
        assert not has_role_access([BASIC], [SYSTEM, CUSTOMER])
        assert not has_role_access([], [BASIC])
