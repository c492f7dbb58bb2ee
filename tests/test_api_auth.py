"""Tests for login, logout and the current-user endpoint."""

from __future__ import annotations

from datetime import timedelta

from auth import issue_token
from core.roles import RoleName


class TestLogin:
    def test_login_with_username(self, client, make_user, make_customer):
        customer = make_customer()
        make_user("alice", [RoleName.CUSTOMER_ADMIN], customer, password="Secret123!")

        resp = client.post("/api/auth/login", json={"login": "alice", "password": "Secret123!"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["roles"] == ["customer-admin"]
        assert body["primary_role"] == "customer-admin"
        assert body["dashboard_url"] == "/customer"
        assert body["user"]["last_login_at"] is not None
        assert resp.cookies.get("access_token") == body["access_token"]

    def test_login_with_email(self, client, make_user):
        make_user("bob", [RoleName.SYSTEM_ADMIN], password="Secret123!")

        resp = client.post("/api/auth/login", json={"login": "bob@example.com", "password": "Secret123!"})

        assert resp.status_code == 200
        assert resp.json()["dashboard_url"] == "/admin/dashboard"

    def test_wrong_password(self, client, make_user):
        make_user("carol", [RoleName.BASIC_USER], password="Secret123!")

        resp = client.post("/api/auth/login", json={"login": "carol", "password": "nope"})

        assert resp.status_code == 401

    def test_unknown_user(self, client):
        resp = client.post("/api/auth/login", json={"login": "ghost", "password": "x"})
        assert resp.status_code == 401

    def test_deactivated_user_cannot_login(self, client, make_user):
        make_user("dave", [RoleName.BASIC_USER], password="Secret123!", active=False)

        resp = client.post("/api/auth/login", json={"login": "dave", "password": "Secret123!"})

        assert resp.status_code == 401

    def test_user_without_roles_lands_on_basic_dashboard(self, client, make_user):
        make_user("erin", [], password="Secret123!")

        resp = client.post("/api/auth/login", json={"login": "erin", "password": "Secret123!"})

        assert resp.json()["primary_role"] == "basic-user"
        assert resp.json()["dashboard_url"] == "/customer/submissions"


class TestMe:
    def test_requires_authentication(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_invalid_token(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401

    def test_expired_token(self, client, make_user):
        user = make_user("frank", [RoleName.BASIC_USER])
        token = issue_token(user.id, user.username, expires_in=timedelta(seconds=-10))

        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401

    def test_deactivated_user_is_forbidden(self, client, make_user, auth_headers):
        user = make_user("gina", [RoleName.BASIC_USER], active=False)
        assert client.get("/api/auth/me", headers=auth_headers(user)).status_code == 403

    def test_group_admin_profile(self, client, org, auth_headers):
        resp = client.get("/api/auth/me", headers=auth_headers(org.north_admin))

        assert resp.status_code == 200
        body = resp.json()
        assert body["primary_role"] == "provider-group-admin"
        assert body["permissions"]["scope"] == "provider-group"
        assert body["permissions"]["can_manage_provider_groups"] is False
        assert "can_manage_customers" not in body["permissions"]
        assert body["scope"] == {"customer_id": org.customer.id, "provider_group_id": org.north.id}

    def test_system_admin_profile(self, client, org, auth_headers):
        body = client.get("/api/auth/me", headers=auth_headers(org.system_admin)).json()

        assert body["permissions"]["can_manage_customers"] is True
        assert body["scope"] == {}

    def test_basic_user_has_no_scope(self, client, org, auth_headers):
        body = client.get("/api/auth/me", headers=auth_headers(org.north_user)).json()
        assert body["scope"] is None

    def test_cookie_authentication(self, client, make_user):
        make_user("hank", [RoleName.BASIC_USER], password="Secret123!")
        client.post("/api/auth/login", json={"login": "hank", "password": "Secret123!"})

        resp = client.get("/api/auth/me")

        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == "hank"


def test_logout_clears_cookie(client, make_user):
    make_user("ivy", [RoleName.BASIC_USER], password="Secret123!")
    client.post("/api/auth/login", json={"login": "ivy", "password": "Secret123!"})

    resp = client.post("/api/auth/logout")

    assert resp.status_code == 200
    assert client.get("/api/auth/me").status_code == 401
