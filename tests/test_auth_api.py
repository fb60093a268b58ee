"""Registration, login, token refresh and the role guard."""

from tests.conftest import API, auth_headers, create_employee, register_owner


class TestRegisterAndLogin:
    def test_register_creates_admin_and_business(self, client):
        tokens = register_owner(client)
        me = client.get(f"{API}/auth/me", headers=auth_headers(tokens["access_token"])).json()
        assert me["role"] == "admin"
        assert me["home_path"] == "/admin/dashboard"
        assert me["email"] == "owner@example.com"

    def test_duplicate_email_conflicts(self, client):
        register_owner(client)
        resp = client.post(
            f"{API}/auth/register",
            json={
                "business_name": "Otro Negocio",
                "full_name": "X",
                "email": "owner@example.com",
                "password": "secret123",
            },
        )
        assert resp.status_code == 409

    def test_short_password_rejected(self, client):
        resp = client.post(
            f"{API}/auth/register",
            json={"business_name": "Spa", "full_name": "X", "email": "x@example.com", "password": "123"},
        )
        assert resp.status_code == 422

    def test_same_business_name_gets_suffixed_slug(self, client):
        register_owner(client, email="a@example.com", business_name="Spa Luna")
        register_owner(client, email="b@example.com", business_name="Spa Luna")
        slugs = [b["slug"] for b in client.get(f"{API}/public/businesses").json()]
        assert sorted(slugs) == ["spa-luna", "spa-luna-2"]

    def test_login(self, client):
        register_owner(client)
        ok = client.post(f"{API}/auth/login", json={"email": "owner@example.com", "password": "secret123"})
        assert ok.status_code == 200
        assert ok.json()["token_type"] == "bearer"
        bad = client.post(f"{API}/auth/login", json={"email": "owner@example.com", "password": "nope"})
        assert bad.status_code == 401


class TestRefresh:
    def test_refresh_rotates_token(self, client):
        tokens = register_owner(client)
        resp = client.post(f"{API}/auth/refresh", headers={"X-Refresh-Token": tokens["refresh_token"]})
        assert resp.status_code == 200
        again = client.post(f"{API}/auth/refresh", headers={"X-Refresh-Token": tokens["refresh_token"]})
        assert again.status_code == 401

    def test_logout_revokes(self, client):
        tokens = register_owner(client)
        client.post(f"{API}/auth/logout", json={"refresh_token": tokens["refresh_token"]})
        resp = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert resp.status_code == 401

    def test_refresh_requires_token(self, client):
        assert client.post(f"{API}/auth/refresh").status_code == 401


class TestChangePassword:
    def test_change_password(self, client, admin_headers):
        wrong = client.post(
            f"{API}/auth/password",
            json={"current_password": "bad", "new_password": "newsecret"},
            headers=admin_headers,
        )
        assert wrong.status_code == 400
        ok = client.post(
            f"{API}/auth/password",
            json={"current_password": "secret123", "new_password": "newsecret"},
            headers=admin_headers,
        )
        assert ok.status_code == 200
        login = client.post(f"{API}/auth/login", json={"email": "owner@example.com", "password": "newsecret"})
        assert login.status_code == 200


class TestGuard:
    def test_no_token(self, client):
        assert client.get(f"{API}/admin/services").status_code == 401

    def test_bad_token(self, client):
        assert client.get(f"{API}/admin/services", headers=auth_headers("garbage")).status_code == 401

    def test_employee_cannot_manage(self, client, admin_headers):
        create_employee(client, admin_headers)
        login = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": "secret1"})
        headers = auth_headers(login.json()["access_token"])

        me = client.get(f"{API}/auth/me", headers=headers).json()
        assert me["home_path"] == "/employee/dashboard"
        assert client.get(f"{API}/admin/services", headers=headers).status_code == 403
        assert client.get(f"{API}/admin/dashboard", headers=headers).status_code == 403
        assert client.get(f"{API}/admin/profile", headers=headers).status_code == 403
        assert client.get(f"{API}/employee/schedule", headers=headers).status_code == 200

    def test_admin_can_use_self_service_routes(self, client, admin_headers):
        assert client.get(f"{API}/employee/profile", headers=admin_headers).status_code == 200
