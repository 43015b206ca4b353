"""
Static role-based access tables.

Each role name maps to an explicit set of navigation items; each restricted
client route maps to an explicit allow-list of role names. There are no
wildcard roles, no hierarchy and no permission inheritance between roles:
a lookup either finds an entry or it does not.
"""
import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional


class NavItem(str, enum.Enum):
    DASHBOARD = "Dashboard"
    ROLES = "Roles"
    USERS = "Users"
    PRODUCTS = "Products"
    POS = "POS"
    FEEDBACKS = "Feedbacks"


# Navigation order as rendered in the sidebar
NAV_ORDER = (
    NavItem.DASHBOARD,
    NavItem.ROLES,
    NavItem.USERS,
    NavItem.PRODUCTS,
    NavItem.POS,
    NavItem.FEEDBACKS,
)

ADMIN = "Admin"
MANAGER = "Manager"
CASHIER = "Cashier"

ROLE_PERMISSIONS: Dict[str, FrozenSet[NavItem]] = {
    ADMIN: frozenset(NAV_ORDER),
    MANAGER: frozenset({NavItem.DASHBOARD, NavItem.PRODUCTS, NavItem.POS, NavItem.FEEDBACKS}),
    CASHIER: frozenset({NavItem.DASHBOARD, NavItem.POS}),
}

# Shown when the user's role could not be resolved
DEFAULT_NAV_ITEMS: FrozenSet[NavItem] = frozenset({NavItem.DASHBOARD, NavItem.POS})

# Client routes that require the caller's role to be in an allow-list.
# Routes not listed here are open to any authenticated user.
ROUTE_ACCESS: Dict[str, FrozenSet[str]] = {
    "/roles": frozenset({ADMIN}),
    "/users": frozenset({ADMIN}),
    "/products": frozenset({ADMIN, MANAGER}),
    "/feedbacks": frozenset({ADMIN, MANAGER}),
}

# Server-side allow-lists for API endpoints, aligned with ROUTE_ACCESS
ROLE_MANAGEMENT_ROLES = sorted(ROUTE_ACCESS["/roles"])
USER_MANAGEMENT_ROLES = sorted(ROUTE_ACCESS["/users"])
PRODUCT_MANAGEMENT_ROLES = sorted(ROUTE_ACCESS["/products"])
FEEDBACK_VIEW_ROLES = sorted(ROUTE_ACCESS["/feedbacks"])

FALLBACK_ROUTE = "/dashboard"


def permissions_for_role(role_name: Optional[str]) -> FrozenSet[NavItem]:
    """Navigation items granted to a named role; unknown names get nothing."""
    if not role_name:
        return frozenset()
    return ROLE_PERMISSIONS.get(role_name, frozenset())


def visible_nav_items(role_name: Optional[str]) -> list[NavItem]:
    """
    Navigation items a user should see, in sidebar order.

    A user whose role is unresolved (no role, or a role without a name) gets
    DEFAULT_NAV_ITEMS.
    """
    allowed = DEFAULT_NAV_ITEMS if not role_name else permissions_for_role(role_name)
    return [item for item in NAV_ORDER if item in allowed]


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: Optional[str] = None


def _route_key(path: str) -> str:
    # "/products/12/edit" -> "/products"
    segment = path.strip("/").split("/", 1)[0]
    return f"/{segment}"


def check_route(role_name: Optional[str], path: str) -> RouteDecision:
    """Decide whether a role may open a client route; mismatches redirect."""
    allowed_roles = ROUTE_ACCESS.get(_route_key(path))
    if allowed_roles is None:
        return RouteDecision(allowed=True)
    if role_name and role_name in allowed_roles:
        return RouteDecision(allowed=True)
    return RouteDecision(allowed=False, redirect_to=FALLBACK_ROUTE)
