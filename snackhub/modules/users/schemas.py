from pydantic import BaseModel, EmailStr, Field, ConfigDict, computed_field, field_validator
from typing import Optional, List
from datetime import datetime

from snackhub.modules.files.service import public_url
from snackhub.modules.users.models import Gender


class UserRoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: int
    role_name: str
    description: Optional[str] = None


class UserBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=55)
    middle_name: Optional[str] = Field(None, max_length=55)
    last_name: str = Field(..., min_length=1, max_length=55)
    suffix_name: Optional[str] = Field(None, max_length=55)
    age: str = Field(..., min_length=1, max_length=10)
    gender: Gender
    contact: str = Field(..., min_length=1, max_length=55)
    address: str = Field(..., min_length=1, max_length=255)
    role_id: int
    email: EmailStr

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, v: str) -> str:
        if len(v) > 55:
            raise ValueError("The email may not be greater than 55 characters.")
        return v


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)


class UserUpdate(UserBase):
    """Password is only changed when provided."""
    password: Optional[str] = Field(None, min_length=8)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    suffix_name: Optional[str] = None
    age: str
    gender: Gender
    contact: str
    address: str
    email: str
    role_id: int
    profile_image: Optional[str] = None
    role: Optional[UserRoleOut] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def profile_image_url(self) -> Optional[str]:
        return public_url(self.profile_image)


class UserList(BaseModel):
    users: List[UserOut]


class MessageResponse(BaseModel):
    message: str
