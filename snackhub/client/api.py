"""
Thin HTTP client for the SnackHub REST API.
"""
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call; status_code is None for network errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


class ApiClient:
    """Calls /api endpoints with an optional bearer token."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}/api{path}"
        try:
            response = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(f"Network error: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise ApiError(
                body.get("message") or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                errors=body.get("errors"),
            )
        return response.json() if response.content else None

    # Auth

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self.request("POST", "/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def logout(self) -> None:
        try:
            self.request("POST", "/logout")
        finally:
            self.token = None

    def current_user(self) -> Dict[str, Any]:
        return self.request("GET", "/user")

    # Catalogue and checkout

    def load_products(self) -> Dict[str, Any]:
        return self.request("GET", "/loadProducts")

    def place_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", "/storeOrder", json=order)

    def submit_feedback(self, order_id: int, rating: Optional[int] = None,
                        comment: Optional[str] = None, email: Optional[str] = None) -> Dict[str, Any]:
        return self.request("POST", "/feedback", json={
            "order_id": order_id,
            "rating": rating,
            "comment": comment,
            "email": email,
        })
