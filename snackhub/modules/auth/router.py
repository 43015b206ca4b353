from fastapi import APIRouter, Depends

from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.dependencies.userDependencies import user_dependency
from snackhub.modules.auth.service import AuthService
from snackhub.modules.auth.schemas import LoginRequest, TokenResponse, CurrentUserOut
from snackhub.modules.auth.utils import get_token_payload
from snackhub.modules.users.schemas import MessageResponse

auth_router = APIRouter(tags=["Auth"])


@auth_router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: db_dependency):
    """
    Login with email and password; returns the bearer token and the profile.
    """
    return AuthService(db).login(credentials.email, credentials.password)


@auth_router.post("/logout", response_model=MessageResponse)
def logout(db: db_dependency, payload: dict = Depends(get_token_payload)):
    """Revoke the current token."""
    return AuthService(db).logout(payload)


@auth_router.get("/user", response_model=CurrentUserOut)
def read_current_user(current_user: user_dependency):
    """Current profile with role; clients use it to validate a stored token."""
    return current_user
