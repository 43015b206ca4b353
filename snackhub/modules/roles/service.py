from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from typing import Dict, Any
import logging

from snackhub.modules.roles.models import Role
from snackhub.modules.roles.schemas import RoleCreate, RoleUpdate
from snackhub.modules.users.models import User

logger = logging.getLogger(__name__)


class RoleService:
    """Role management. A role in use by any user cannot be deleted."""

    def __init__(self, db: Session):
        self.db = db

    def get_all_roles(self) -> Dict[str, Any]:
        roles = self.db.query(Role).order_by(Role.role_id).all()
        return {"roles": roles}

    def get_role_by_id(self, role_id: int) -> Role:
        role = self.db.query(Role).filter(Role.role_id == role_id).first()
        if not role:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Role not found"
            )
        return role

    def _ensure_unique_name(self, role_name: str, exclude_id: int = None):
        query = self.db.query(Role).filter(Role.role_name == role_name)
        if exclude_id is not None:
            query = query.filter(Role.role_id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"The role name '{role_name}' has already been taken."
            )

    def create_role(self, role_data: RoleCreate) -> Role:
        """
        Create a new role.

        Raises:
            HTTPException: 422 when the name is taken, 500 on database errors
        """
        try:
            self._ensure_unique_name(role_data.role_name)

            role = Role(
                role_name=role_data.role_name,
                description=role_data.description
            )
            self.db.add(role)
            self.db.commit()
            self.db.refresh(role)
            logger.info(f"Role created: {role.role_name} ({role.role_id})")
            return role

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"The role name '{role_data.role_name}' has already been taken."
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating role")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating role"
            )

    def update_role(self, role_id: int, update_data: RoleUpdate) -> Role:
        try:
            role = self.get_role_by_id(role_id)
            if update_data.role_name != role.role_name:
                self._ensure_unique_name(update_data.role_name, exclude_id=role_id)

            role.role_name = update_data.role_name
            role.description = update_data.description

            self.db.commit()
            self.db.refresh(role)
            return role

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating role {role_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating role"
            )

    def delete_role(self, role_id: int) -> Dict[str, str]:
        """Delete a role unless users are still assigned to it."""
        try:
            role = self.get_role_by_id(role_id)

            user_count = self.db.query(User).filter(User.role_id == role_id).count()
            if user_count > 0:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Cannot delete role because it is assigned to one or more users"
                )

            self.db.delete(role)
            self.db.commit()
            logger.info(f"Role deleted: {role_id}")
            return {"message": "Role deleted successfully"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting role {role_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error deleting role"
            )
