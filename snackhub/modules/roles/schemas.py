from pydantic import BaseModel, Field, ConfigDict, field_validator, computed_field
from typing import Optional, List
from datetime import datetime

from snackhub.modules.access.permissions import permissions_for_role, NAV_ORDER


class RoleCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    role_name: str = Field(..., alias="roleName", min_length=1, max_length=55)
    description: Optional[str] = Field(None, max_length=255)

    @field_validator("role_name")
    @classmethod
    def strip_role_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("The role name field is required.")
        return cleaned


class RoleUpdate(RoleCreate):
    pass


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: int
    role_name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def permissions(self) -> List[str]:
        granted = permissions_for_role(self.role_name)
        return [item.value for item in NAV_ORDER if item in granted]


class RoleList(BaseModel):
    roles: List[RoleOut]
