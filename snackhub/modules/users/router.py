from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from typing import Optional

from snackhub.common.forms import parse_form
from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.modules.access.permissions import USER_MANAGEMENT_ROLES
from snackhub.modules.auth.dependencies import require_role
from snackhub.modules.auth.utils import get_current_user
from snackhub.modules.files.service import ImageStorage, get_image_storage
from snackhub.modules.users.service import UserService
from snackhub.modules.users.schemas import UserCreate, UserUpdate, UserOut, UserList, MessageResponse

user_router = APIRouter(tags=["Users"])


def _user_form(
    first_name: str = Form(None, alias="firstName"),
    middle_name: Optional[str] = Form(None, alias="middleName"),
    last_name: str = Form(None, alias="lastName"),
    suffix_name: Optional[str] = Form(None, alias="suffixName"),
    age: str = Form(None),
    gender: str = Form(None),
    contact: str = Form(None),
    address: str = Form(None),
    role_id: str = Form(None, alias="roleId"),
    email: str = Form(None),
    password: Optional[str] = Form(None),
) -> dict:
    return {
        "first_name": first_name,
        "middle_name": middle_name,
        "last_name": last_name,
        "suffix_name": suffix_name,
        "age": age,
        "gender": gender,
        "contact": contact,
        "address": address,
        "role_id": role_id,
        "email": email,
        "password": password,
    }


@user_router.get("/loadUsers", response_model=UserList, dependencies=[Depends(get_current_user)])
def load_users(db: db_dependency):
    return UserService(db).get_all_users()


@user_router.post(
    "/storeUser",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role(USER_MANAGEMENT_ROLES))]
)
def store_user(
    db: db_dependency,
    form: dict = Depends(_user_form),
    profile_image: Optional[UploadFile] = File(None, alias="profileImage"),
    storage: ImageStorage = Depends(get_image_storage),
):
    """Create a staff user (multipart form, optional profileImage)."""
    user_data = parse_form(UserCreate, form)
    return UserService(db, storage).create_user(user_data, profile_image)


@user_router.put(
    "/updateUser/{user_id}",
    response_model=UserOut,
    dependencies=[Depends(require_role(USER_MANAGEMENT_ROLES))]
)
def update_user(
    user_id: int,
    db: db_dependency,
    form: dict = Depends(_user_form),
    profile_image: Optional[UploadFile] = File(None, alias="profileImage"),
    storage: ImageStorage = Depends(get_image_storage),
):
    """Update a staff user; the password changes only when a new one is sent."""
    update_data = parse_form(UserUpdate, form)
    return UserService(db, storage).update_user(user_id, update_data, profile_image)


@user_router.delete(
    "/deleteUser/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_role(USER_MANAGEMENT_ROLES))]
)
def delete_user(user_id: int, db: db_dependency, storage: ImageStorage = Depends(get_image_storage)):
    return UserService(db, storage).delete_user(user_id)
