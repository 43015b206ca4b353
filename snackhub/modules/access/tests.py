"""
Tests for the static role tables and the navigation endpoints
"""
import pytest

from snackhub.modules.access.permissions import (
    NavItem,
    DEFAULT_NAV_ITEMS,
    ROLE_PERMISSIONS,
    check_route,
    permissions_for_role,
    visible_nav_items,
)


class TestNavigationTable:

    @pytest.mark.parametrize("role_name", [None, ""])
    def test_unresolved_role_sees_dashboard_and_pos(self, role_name):
        assert set(visible_nav_items(role_name)) == {NavItem.DASHBOARD, NavItem.POS}
        assert set(visible_nav_items(role_name)) == DEFAULT_NAV_ITEMS

    def test_admin_sees_everything_in_order(self):
        assert visible_nav_items("Admin") == list(NavItem)

    def test_manager(self):
        assert visible_nav_items("Manager") == [
            NavItem.DASHBOARD, NavItem.PRODUCTS, NavItem.POS, NavItem.FEEDBACKS
        ]

    def test_unknown_role_gets_nothing(self):
        assert visible_nav_items("Janitor") == []
        assert permissions_for_role("Janitor") == frozenset()

    def test_role_names_are_exact(self):
        """No case folding, wildcards or inheritance"""
        assert visible_nav_items("admin") == []
        assert ROLE_PERMISSIONS["Cashier"] < ROLE_PERMISSIONS["Manager"]
        assert NavItem.USERS not in permissions_for_role("Manager")


class TestRouteAccess:

    def test_allowed(self):
        assert check_route("Manager", "/products").allowed

    def test_mismatch_redirects(self):
        decision = check_route("Cashier", "/products/12/edit")
        assert not decision.allowed
        assert decision.redirect_to == "/dashboard"

    def test_unrestricted_route(self):
        assert check_route("Cashier", "/pos").allowed

    def test_unresolved_role_is_redirected_from_restricted_routes(self):
        assert check_route(None, "/users").redirect_to == "/dashboard"


class TestAccessEndpoints:

    def test_navigation(self, client, manager_headers):
        response = client.get("/api/navigation", headers=manager_headers)

        assert response.status_code == 200
        assert response.json() == {
            "role_name": "Manager",
            "nav_items": ["Dashboard", "Products", "POS", "Feedbacks"],
        }

    def test_check_route(self, client, cashier_headers):
        response = client.get("/api/checkRoute", params={"path": "/roles"}, headers=cashier_headers)

        assert response.status_code == 200
        assert response.json() == {"path": "/roles", "allowed": False, "redirect_to": "/dashboard"}
