from pydantic import BaseModel, EmailStr, Field, computed_field
from typing import List

from snackhub.modules.access.permissions import NAV_ORDER, visible_nav_items
from snackhub.modules.users.schemas import UserOut


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class CurrentUserOut(UserOut):
    """Profile returned by login and /user, with the navigation the role unlocks."""

    @computed_field
    @property
    def nav_items(self) -> List[str]:
        visible = visible_nav_items(self.role.role_name if self.role else None)
        return [item.value for item in NAV_ORDER if item in visible]


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: CurrentUserOut
