from fastapi import APIRouter, Query
from pydantic import BaseModel
from typing import List, Optional

from snackhub.dependencies.userDependencies import user_dependency
from snackhub.modules.access.permissions import check_route, visible_nav_items

access_router = APIRouter(tags=["Access"])


class NavigationOut(BaseModel):
    role_name: Optional[str] = None
    nav_items: List[str]


class RouteDecisionOut(BaseModel):
    path: str
    allowed: bool
    redirect_to: Optional[str] = None


def _role_name(user) -> Optional[str]:
    return user.role.role_name if user.role else None


@access_router.get("/navigation", response_model=NavigationOut)
def navigation(current_user: user_dependency):
    role_name = _role_name(current_user)
    return {"role_name": role_name, "nav_items": [item.value for item in visible_nav_items(role_name)]}


@access_router.get("/checkRoute", response_model=RouteDecisionOut)
def route_access(current_user: user_dependency, path: str = Query(..., min_length=1)):
    """Whether the current user may open a client route, and where to go instead."""
    decision = check_route(_role_name(current_user), path)
    return {"path": path, "allowed": decision.allowed, "redirect_to": decision.redirect_to}
