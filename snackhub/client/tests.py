"""
Tests for the client session state machine

The API client is pointed at the FastAPI app through TestClient, which
speaks the same request/response interface as requests.Session.
"""
import pytest
import requests

from snackhub.client.api import ApiClient, ApiError
from snackhub.client.session import (
    FileTokenStore,
    MemoryTokenStore,
    SessionManager,
    SessionState,
    is_public_path,
)


@pytest.fixture
def client_factory(client):
    def _factory(token):
        return ApiClient("http://testserver", token=token, session=client)
    return _factory


class OfflineSession:
    def request(self, *args, **kwargs):
        raise requests.ConnectionError("connection refused")


class TestPublicPaths:

    @pytest.mark.parametrize("path", ["/login", "/public-feedback", "/feedback", "/feedback/12", "/feedback-success"])
    def test_public(self, path):
        assert is_public_path(path)

    @pytest.mark.parametrize("path", ["/", "/dashboard", "/pos", "/feedbacks", "/feedback-admin"])
    def test_private(self, path):
        assert not is_public_path(path)


class TestBootstrap:

    def test_starts_pending(self, client_factory):
        manager = SessionManager(MemoryTokenStore(), client_factory)
        assert manager.state == SessionState.PENDING
        assert manager.user is None

    def test_no_token_is_invalid(self, client_factory):
        manager = SessionManager(MemoryTokenStore(), client_factory)

        assert manager.bootstrap() == SessionState.INVALID
        assert manager.route_for("/dashboard") == "/login"
        assert manager.route_for("/feedback/3") == "/feedback/3"

    def test_valid_token_is_verified(self, client_factory, cashier_user, headers_for):
        token = headers_for(cashier_user)["Authorization"].split(" ", 1)[1]
        store = MemoryTokenStore(token)
        manager = SessionManager(store, client_factory)

        assert manager.bootstrap() == SessionState.VERIFIED
        assert manager.user["email"] == cashier_user.email
        assert manager.nav_items() == ["Dashboard", "POS"]
        assert manager.route_for("/pos") == "/pos"
        assert manager.route_for("/users") == "/dashboard"
        assert store.load() == token

    def test_rejected_token_clears_store(self, client_factory):
        store = MemoryTokenStore("not-a-jwt")
        manager = SessionManager(store, client_factory)

        assert manager.bootstrap() == SessionState.INVALID
        assert store.load() is None
        assert manager.user is None

    def test_profile_without_role_is_invalid(self):
        class RolelessClient:
            def current_user(self):
                return {"user_id": 1, "email": "x@snackhub.com", "role": None}

        store = MemoryTokenStore("token")
        manager = SessionManager(store, lambda token: RolelessClient())

        assert manager.bootstrap() == SessionState.INVALID
        assert store.load() is None

    def test_network_error_is_invalid(self):
        store = MemoryTokenStore("token")
        manager = SessionManager(
            store, lambda token: ApiClient("http://offline", token=token, session=OfflineSession())
        )

        assert manager.bootstrap() == SessionState.INVALID
        assert store.load() is None


class TestLoginLogout:

    def test_login_then_logout(self, client_factory, admin_user, user_password, tmp_path):
        store = FileTokenStore(str(tmp_path / "session.json"))
        manager = SessionManager(store, client_factory)

        assert manager.login(admin_user.email, user_password) == SessionState.VERIFIED
        token = store.load()
        assert token

        # A fresh run picks the stored token up again
        again = SessionManager(FileTokenStore(str(tmp_path / "session.json")), client_factory)
        assert again.bootstrap() == SessionState.VERIFIED

        assert manager.logout() == SessionState.INVALID
        assert store.load() is None

        # The server no longer accepts the revoked token
        stale = SessionManager(MemoryTokenStore(token), client_factory)
        assert stale.bootstrap() == SessionState.INVALID

    def test_bad_credentials_raise(self, client_factory, admin_user):
        manager = SessionManager(MemoryTokenStore(), client_factory)

        with pytest.raises(ApiError) as exc:
            manager.login(admin_user.email, "wrong-password")

        assert exc.value.status_code == 422
        assert "email" in exc.value.errors
        assert manager.state == SessionState.PENDING
