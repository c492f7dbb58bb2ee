"""Tests for NPI registration, scoping and group assignment."""

from __future__ import annotations

import pytest
from sqlmodel import select

from database.models import UserNpi


class TestCreate:
    def test_customer_admin_registers_npi(self, client, org, auth_headers):
        resp = client.post(
            "/api/providers",
            json={"npi": "1234567890", "name": "Dr. Who", "provider_group_id": org.north.id},
            headers=auth_headers(org.customer_admin),
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["customer_id"] == org.customer.id
        assert body["provider_group_id"] == org.north.id
        assert body["active"] is True

    @pytest.mark.parametrize("npi", ["123456789", "12345678901", "12345abcde", ""])
    def test_npi_must_be_ten_digits(self, client, org, auth_headers, npi):
        resp = client.post("/api/providers", json={"npi": npi}, headers=auth_headers(org.customer_admin))
        assert resp.status_code == 422

    def test_npi_is_unique(self, client, org, auth_headers, make_provider, make_customer):
        make_provider(make_customer("Other Org"), "1234567890")

        resp = client.post("/api/providers", json={"npi": "1234567890"}, headers=auth_headers(org.customer_admin))

        assert resp.status_code == 400

    def test_group_admin_creates_in_own_group(self, client, org, auth_headers):
        resp = client.post("/api/providers", json={"npi": "2222222222"}, headers=auth_headers(org.north_admin))

        assert resp.status_code == 201
        assert resp.json()["provider_group_id"] == org.north.id

    def test_group_admin_cannot_create_in_other_group(self, client, org, auth_headers):
        resp = client.post(
            "/api/providers",
            json={"npi": "2222222222", "provider_group_id": org.south.id},
            headers=auth_headers(org.north_admin),
        )
        assert resp.status_code == 403

    def test_group_from_other_customer_rejected(self, client, org, auth_headers, make_customer, make_group):
        foreign = make_group(make_customer("Other Org"), "Foreign")
        resp = client.post(
            "/api/providers",
            json={"npi": "3333333333", "provider_group_id": foreign.id},
            headers=auth_headers(org.customer_admin),
        )
        assert resp.status_code == 400

    def test_basic_user_cannot_create(self, client, org, auth_headers):
        resp = client.post("/api/providers", json={"npi": "4444444444"}, headers=auth_headers(org.north_user))
        assert resp.status_code == 403


class TestListing:
    def test_scoped_listing(self, client, org, auth_headers, make_provider):
        make_provider(org.customer, "1000000001", org.north)
        make_provider(org.customer, "1000000002", org.south)
        make_provider(org.customer, "1000000003")

        customer_view = client.get("/api/providers", headers=auth_headers(org.customer_admin)).json()
        north_view = client.get("/api/providers", headers=auth_headers(org.north_admin)).json()

        assert customer_view["total"] == 3
        assert [p["npi"] for p in north_view["providers"]] == ["1000000001"]

    def test_basic_user_sees_assigned_npis(self, client, org, auth_headers, make_provider, session):
        assigned = make_provider(org.customer, "1000000001", org.north)
        make_provider(org.customer, "1000000002", org.north)
        session.add(UserNpi(user_id=org.north_user.id, provider_id=assigned.id))
        session.commit()

        body = client.get("/api/providers", headers=auth_headers(org.north_user)).json()

        assert [p["npi"] for p in body["providers"]] == ["1000000001"]

    def test_search(self, client, org, auth_headers, make_provider):
        make_provider(org.customer, "1000000001")
        make_provider(org.customer, "1999999999")

        body = client.get(
            "/api/providers", params={"search": "1999"}, headers=auth_headers(org.customer_admin)
        ).json()

        assert [p["npi"] for p in body["providers"]] == ["1999999999"]


class TestUpdateAndAssign:
    def test_deactivate(self, client, org, auth_headers, make_provider):
        provider = make_provider(org.customer, "1000000001", org.north)

        resp = client.patch(
            f"/api/providers/{provider.id}", json={"active": False}, headers=auth_headers(org.north_admin)
        )

        assert resp.status_code == 200
        assert resp.json()["active"] is False

    def test_group_admin_cannot_touch_other_group(self, client, org, auth_headers, make_provider):
        provider = make_provider(org.customer, "1000000001", org.south)

        resp = client.patch(
            f"/api/providers/{provider.id}", json={"name": "Mine"}, headers=auth_headers(org.north_admin)
        )

        assert resp.status_code == 404

    def test_customer_admin_moves_npi_between_groups(self, client, org, auth_headers, make_provider):
        provider = make_provider(org.customer, "1000000001", org.north)

        resp = client.put(
            f"/api/providers/{provider.id}/group",
            json={"provider_group_id": org.south.id},
            headers=auth_headers(org.customer_admin),
        )

        assert resp.status_code == 200
        assert resp.json()["provider_group_id"] == org.south.id

    def test_group_admin_cannot_move_npi_out_of_group(self, client, org, auth_headers, make_provider):
        provider = make_provider(org.customer, "1000000001", org.north)
        headers = auth_headers(org.north_admin)

        to_south = client.put(
            f"/api/providers/{provider.id}/group", json={"provider_group_id": org.south.id}, headers=headers
        )
        ungrouped = client.put(
            f"/api/providers/{provider.id}/group", json={"provider_group_id": None}, headers=headers
        )

        assert to_south.status_code == 403
        assert ungrouped.status_code == 403

    def test_delete(self, client, org, auth_headers, make_provider):
        provider = make_provider(org.customer, "1000000001")
        headers = auth_headers(org.customer_admin)

        assert client.delete(f"/api/providers/{provider.id}", headers=headers).status_code == 204
        assert client.get(f"/api/providers/{provider.id}", headers=headers).status_code == 404

    def test_moving_npi_drops_assignments_of_old_group(
        self, client, org, auth_headers, make_provider, make_user, session
    ):
        provider = make_provider(org.customer, "1000000001", org.north)
        floater = make_user("floater", ["basic-user"], org.customer)
        session.add(UserNpi(user_id=org.north_user.id, provider_id=provider.id))
        session.add(UserNpi(user_id=floater.id, provider_id=provider.id))
        session.commit()

        resp = client.put(
            f"/api/providers/{provider.id}/group",
            json={"provider_group_id": org.south.id},
            headers=auth_headers(org.customer_admin),
        )

        assert resp.status_code == 200
        holders = {npi.user_id for npi in session.exec(select(UserNpi)).all()}
        assert holders == {floater.id}
