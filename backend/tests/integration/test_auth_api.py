"""
Integration tests for the authentication and users endpoints.

Tests end-to-end flows:
- Register, login, me, logout
- Bearer token handling (missing, invalid, blocked user)
- User listing and lookup
- Filing an account deletion request
"""

import pytest

from backend.src.api.auth import limiter


REGISTRATION = {
    "username": "jdoe",
    "email": "jdoe@example.com",
    "password": "secret123",
    "phone_number": "0888123456",
    "first_name": "John",
    "last_name": "Doe",
}


class TestAuthAPI:
    """Integration tests for /api/auth."""

    def test_register_login_me_logout(self, test_client):
        response = test_client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "jdoe"
        assert "password_hash" not in body["user"]

        response = test_client.post(
            "/api/auth/login",
            json={"email": "JDOE@example.com", "password": "secret123"},
        )
        assert response.status_code == 200
        token = response.json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        me = test_client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["email"] == "jdoe@example.com"

        logout = test_client.post("/api/auth/logout", headers=headers)
        assert logout.status_code == 200
        assert logout.json()["message"]

    def test_register_invalid_phone(self, test_client):
        response = test_client.post(
            "/api/auth/register", json={**REGISTRATION, "phone_number": "12345"}
        )

        assert response.status_code == 400

    def test_register_duplicate(self, test_client):
        test_client.post("/api/auth/register", json=REGISTRATION)

        response = test_client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 409

    def test_register_missing_field(self, test_client):
        payload = dict(REGISTRATION)
        del payload["email"]

        response = test_client.post("/api/auth/register", json=payload)

        assert response.status_code == 422

    def test_login_wrong_password(self, test_client):
        test_client.post("/api/auth/register", json=REGISTRATION)

        response = test_client.post(
            "/api/auth/login",
            json={"email": "jdoe@example.com", "password": "wrongpass1"},
        )

        assert response.status_code == 401

    def test_me_requires_token(self, test_client):
        assert test_client.get("/api/auth/me").status_code == 401
        assert test_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer garbage"}
        ).status_code == 401

    def test_blocked_user_token_rejected(
        self, test_client, alice, auth_headers, test_db_session
    ):
        headers = auth_headers(alice)
        alice.is_blocked = True
        test_db_session.commit()

        response = test_client.get("/api/auth/me", headers=headers)

        assert response.status_code == 403

    def test_login_rate_limited(self, test_client):
        limiter.enabled = True
        limiter.reset()
        try:
            statuses = [
                test_client.post(
                    "/api/auth/login",
                    json={"email": "nobody@example.com", "password": "secret123"},
                ).status_code
                for _ in range(11)
            ]
        finally:
            limiter.reset()
            limiter.enabled = False

        assert statuses[:10] == [401] * 10
        assert statuses[10] == 429


class TestUsersAPI:
    """Integration tests for /api/users."""

    def test_list_users(self, test_client, alice, bob, auth_headers):
        response = test_client.get("/api/users", headers=auth_headers(alice))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [u["username"] for u in body["users"]] == ["alice", "bob"]

    def test_get_by_username(self, test_client, alice, bob, auth_headers):
        response = test_client.get("/api/users/username/bob", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json()["guid"] == bob.guid

        missing = test_client.get("/api/users/username/ghost", headers=auth_headers(alice))
        assert missing.status_code == 404

    def test_request_account_deletion(self, test_client, alice, auth_headers):
        headers = auth_headers(alice)

        response = test_client.post(
            "/api/users/me/delete-request", json={"reason": "Leaving"}, headers=headers
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert response.json()["reason"] == "Leaving"

        again = test_client.post("/api/users/me/delete-request", headers=headers)
        assert again.status_code == 409
