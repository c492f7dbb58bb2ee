"""Tests for provider group management and visibility."""

from __future__ import annotations

from core.roles import RoleName


class TestVisibility:
    def test_customer_admin_sees_all_groups_of_customer(self, client, org, auth_headers, make_customer, make_group):
        make_group(make_customer("Other Org"), "Elsewhere")

        body = client.get("/api/provider-groups", headers=auth_headers(org.customer_admin)).json()

        assert body["total"] == 2
        assert {g["name"] for g in body["provider_groups"]} == {"North Clinic", "South Clinic"}

    def test_system_admin_sees_everything(self, client, org, auth_headers, make_customer, make_group):
        other = make_customer("Other Org")
        make_group(other, "Elsewhere")
        headers = auth_headers(org.system_admin)

        assert client.get("/api/provider-groups", headers=headers).json()["total"] == 3
        filtered = client.get("/api/provider-groups", params={"customer_id": other.id}, headers=headers).json()
        assert [g["name"] for g in filtered["provider_groups"]] == ["Elsewhere"]

    def test_group_admin_sees_only_own_group(self, client, org, auth_headers):
        headers = auth_headers(org.north_admin)
        body = client.get("/api/provider-groups", headers=headers).json()

        assert [g["id"] for g in body["provider_groups"]] == [org.north.id]
        assert client.get(f"/api/provider-groups/{org.south.id}", headers=headers).status_code == 404

    def test_group_admin_without_group_is_denied(self, client, org, auth_headers, make_user):
        stray = make_user("stray_admin", [RoleName.PROVIDER_GROUP_ADMIN], org.customer)
        assert client.get("/api/provider-groups", headers=auth_headers(stray)).status_code == 403

    def test_basic_user_is_denied(self, client, org, auth_headers):
        assert client.get("/api/provider-groups", headers=auth_headers(org.north_user)).status_code == 403

    def test_member_counts(self, client, org, auth_headers, make_provider):
        make_provider(org.customer, "1111111111", org.north)

        body = client.get(f"/api/provider-groups/{org.north.id}", headers=auth_headers(org.customer_admin)).json()

        assert body["user_count"] == 2  # north_admin and north_user
        assert body["provider_count"] == 1


class TestManagement:
    def test_customer_admin_creates_group_in_own_customer(self, client, org, auth_headers):
        resp = client.post(
            "/api/provider-groups",
            json={"name": "East Clinic", "description": "New site"},
            headers=auth_headers(org.customer_admin),
        )

        assert resp.status_code == 201
        assert resp.json()["customer_id"] == org.customer.id

    def test_customer_admin_cannot_target_other_customer(self, client, org, auth_headers, make_customer):
        other = make_customer("Other Org")
        resp = client.post(
            "/api/provider-groups",
            json={"name": "East Clinic", "customer_id": other.id},
            headers=auth_headers(org.customer_admin),
        )
        assert resp.status_code == 403

    def test_system_admin_must_name_customer(self, client, org, auth_headers):
        headers = auth_headers(org.system_admin)

        assert client.post("/api/provider-groups", json={"name": "X"}, headers=headers).status_code == 400
        resp = client.post(
            "/api/provider-groups",
            json={"name": "X", "customer_id": org.customer.id},
            headers=headers,
        )
        assert resp.status_code == 201

    def test_duplicate_name_within_customer(self, client, org, auth_headers):
        resp = client.post(
            "/api/provider-groups",
            json={"name": "North Clinic"},
            headers=auth_headers(org.customer_admin),
        )
        assert resp.status_code == 400

    def test_same_name_allowed_in_other_customer(self, client, org, auth_headers, make_customer):
        other = make_customer("Other Org")
        resp = client.post(
            "/api/provider-groups",
            json={"name": "North Clinic", "customer_id": other.id},
            headers=auth_headers(org.system_admin),
        )
        assert resp.status_code == 201

    def test_group_admin_cannot_manage_groups(self, client, org, auth_headers):
        headers = auth_headers(org.north_admin)

        assert client.post("/api/provider-groups", json={"name": "Y"}, headers=headers).status_code == 403
        resp = client.patch(f"/api/provider-groups/{org.north.id}", json={"name": "Renamed"}, headers=headers)
        assert resp.status_code == 403

    def test_rename(self, client, org, auth_headers):
        headers = auth_headers(org.customer_admin)

        resp = client.patch(f"/api/provider-groups/{org.south.id}", json={"name": "South Campus"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["name"] == "South Campus"

        clash = client.patch(f"/api/provider-groups/{org.south.id}", json={"name": "North Clinic"}, headers=headers)
        assert clash.status_code == 400

    def test_delete_refused_while_members_attached(self, client, org, auth_headers):
        resp = client.delete(f"/api/provider-groups/{org.north.id}", headers=auth_headers(org.customer_admin))
        assert resp.status_code == 400

    def test_delete_empty_group(self, client, org, auth_headers, make_group):
        empty = make_group(org.customer, "Empty Clinic")
        headers = auth_headers(org.customer_admin)

        assert client.delete(f"/api/provider-groups/{empty.id}", headers=headers).status_code == 204
        assert client.get(f"/api/provider-groups/{empty.id}", headers=headers).status_code == 404
