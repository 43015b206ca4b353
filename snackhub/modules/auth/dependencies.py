"""
Authentication dependencies for FastAPI routes.
"""
from fastapi import Depends, HTTPException, status

from snackhub.modules.auth.utils import get_current_user
from snackhub.modules.users.models import User


class AuthDependencies:
    """Reusable authentication dependencies."""

    @staticmethod
    def require_role(allowed_roles: list[str]):
        """
        Require the current user's role name to be in allowed_roles.
        """
        def role_checker(current_user: User = Depends(get_current_user)) -> User:
            role_name = current_user.role.role_name if current_user.role else None
            if role_name not in allowed_roles:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"This action requires one of these roles: {', '.join(allowed_roles)}"
                )
            return current_user
        return role_checker


require_role = AuthDependencies.require_role
