"""
Client-side session handling.

A session starts PENDING. bootstrap() looks for a stored token and asks the
server who it belongs to; the session becomes VERIFIED only when the server
returns a profile with a resolvable role. Anything else (no token, expired or
revoked token, network or server failure, a profile without a role) makes it
INVALID and clears the stored token. The profile is never used before the
server has confirmed it.
"""
import enum
import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional

from snackhub.client.api import ApiClient, ApiError
from snackhub.modules.access.permissions import check_route, visible_nav_items

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"

PUBLIC_PATHS = frozenset({"/login", "/public-feedback", "/feedback", "/feedback-success"})


def is_public_path(path: str) -> bool:
    normalized = "/" + path.strip("/")
    return normalized in PUBLIC_PATHS or normalized.startswith("/feedback/")


class SessionState(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    INVALID = "invalid"


class TokenStore:
    """Where the bearer token survives between runs."""

    def load(self) -> Optional[str]:
        raise NotImplementedError

    def save(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStore(TokenStore):

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Keeps the token in a small JSON file."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[str]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                return json.load(fh).get("token") or None
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable token file {self.path}: {e}")
            return None

    def save(self, token: str) -> None:
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump({"token": token}, fh)

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass


def _role_name(profile: Optional[Dict[str, Any]]) -> Optional[str]:
    if not profile:
        return None
    role = profile.get("role") or {}
    return role.get("role_name") or None


class SessionManager:
    """Single source of truth for who is logged in on this client."""

    def __init__(self, store: TokenStore, client_factory: Callable[[Optional[str]], ApiClient]):
        self.store = store
        self.client_factory = client_factory
        self.state = SessionState.PENDING
        self.user: Optional[Dict[str, Any]] = None
        self.client: Optional[ApiClient] = None

    @property
    def role_name(self) -> Optional[str]:
        return _role_name(self.user) if self.state == SessionState.VERIFIED else None

    def invalidate(self) -> SessionState:
        self.store.clear()
        self.user = None
        self.client = None
        self.state = SessionState.INVALID
        return self.state

    def _accept(self, client: ApiClient, profile: Dict[str, Any]) -> SessionState:
        if not _role_name(profile):
            logger.info("Profile has no resolvable role; clearing session")
            return self.invalidate()
        self.client = client
        self.user = profile
        self.state = SessionState.VERIFIED
        return self.state

    def bootstrap(self) -> SessionState:
        """Validate the stored token against the server."""
        self.state = SessionState.PENDING
        self.user = None

        token = self.store.load()
        if not token:
            return self.invalidate()

        client = self.client_factory(token)
        try:
            profile = client.current_user()
        except ApiError as e:
            logger.info(f"Stored session rejected ({e.status_code}): {e.message}")
            return self.invalidate()

        return self._accept(client, profile)

    def login(self, email: str, password: str) -> SessionState:
        """Log in; ApiError (e.g. bad credentials) propagates to the caller."""
        client = self.client_factory(None)
        data = client.login(email, password)
        self.store.save(data["token"])
        return self._accept(client, data.get("user"))

    def logout(self) -> SessionState:
        if self.client is not None:
            try:
                self.client.logout()
            except ApiError as e:
                logger.warning(f"Server logout failed: {e.message}")
        return self.invalidate()

    def nav_items(self) -> List[str]:
        if self.state != SessionState.VERIFIED:
            return []
        return [item.value for item in visible_nav_items(self.role_name)]

    def route_for(self, path: str) -> str:
        """Path to render for a requested path given the session state."""
        if self.state != SessionState.VERIFIED:
            return path if is_public_path(path) else LOGIN_ROUTE
        decision = check_route(self.role_name, path)
        return path if decision.allowed else decision.redirect_to
