"""
Tests for login, logout and the current-user endpoint
"""
from datetime import timedelta

from snackhub.modules.auth.utils import create_access_token


class TestLogin:

    def test_login_returns_token_and_profile(self, client, admin_user, user_password):
        response = client.post("/api/login", json={"email": admin_user.email, "password": user_password})

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == admin_user.email
        assert body["user"]["role"]["role_name"] == "Admin"
        assert body["user"]["nav_items"] == ["Dashboard", "Roles", "Users", "Products", "POS", "Feedbacks"]

    def test_wrong_password(self, client, admin_user):
        response = client.post("/api/login", json={"email": admin_user.email, "password": "wrong-password"})

        assert response.status_code == 422
        assert response.json()["errors"]["email"] == ["The provided credentials are incorrect."]

    def test_unknown_email(self, client, roles, user_password):
        response = client.post("/api/login", json={"email": "nobody@snackhub.com", "password": user_password})
        assert response.status_code == 422


class TestCurrentUser:

    def test_current_user(self, client, cashier_user, cashier_headers):
        response = client.get("/api/user", headers=cashier_headers)

        assert response.status_code == 200
        assert response.json()["user_id"] == cashier_user.user_id
        assert response.json()["nav_items"] == ["Dashboard", "POS"]

    def test_missing_token(self, client):
        assert client.get("/api/user").status_code in (401, 403)

    def test_garbage_token(self, client):
        response = client.get("/api/user", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthenticated."

    def test_expired_token(self, client, cashier_user):
        token = create_access_token({"sub": str(cashier_user.user_id)}, expires_delta=timedelta(seconds=-1))
        response = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, make_user, db_session, headers_for):
        user = make_user(email="gone@snackhub.com")
        headers = headers_for(user)
        db_session.delete(user)
        db_session.commit()

        assert client.get("/api/user", headers=headers).status_code == 401


class TestLogout:

    def test_logout_revokes_token(self, client, cashier_headers):
        assert client.post("/api/logout", headers=cashier_headers).status_code == 200
        assert client.get("/api/user", headers=cashier_headers).status_code == 401

    def test_other_tokens_stay_valid(self, client, cashier_user, headers_for):
        first = headers_for(cashier_user)
        second = headers_for(cashier_user)

        client.post("/api/logout", headers=first)

        assert client.get("/api/user", headers=second).status_code == 200
