from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, UploadFile, status
from typing import Dict, Any, Optional
import logging

from snackhub.modules.auth.utils import hash_password
from snackhub.modules.files.service import ImageStorage
from snackhub.modules.orders.models import Order
from snackhub.modules.roles.models import Role
from snackhub.modules.users.models import User
from snackhub.modules.users.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

IMAGE_FOLDER = "users"


class UserService:
    """Staff account management"""

    def __init__(self, db: Session, storage: Optional[ImageStorage] = None):
        self.db = db
        self.storage = storage

    def get_all_users(self) -> Dict[str, Any]:
        users = self.db.query(User).order_by(User.user_id).all()
        return {"users": users}

    def get_user_by_id(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.user_id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        return user

    def _validate_role(self, role_id: int):
        if not self.db.query(Role).filter(Role.role_id == role_id).first():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="The selected role id is invalid."
            )

    def _validate_unique_email(self, email: str, exclude_id: Optional[int] = None):
        query = self.db.query(User).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.user_id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="The email has already been taken."
            )

    def _store_image(self, image: Optional[UploadFile]) -> Optional[str]:
        if image is None or not image.filename:
            return None
        if self.storage is None:
            raise RuntimeError("Image storage is not configured")
        return self.storage.save_image(IMAGE_FOLDER, image)

    def create_user(self, user_data: UserCreate, image: Optional[UploadFile] = None) -> User:
        """
        Create a staff user with an optional profile image.

        Raises:
            HTTPException: 422 for an unknown role or duplicate email
        """
        self._validate_role(user_data.role_id)
        self._validate_unique_email(user_data.email)

        image_key = self._store_image(image)
        try:
            fields = user_data.model_dump(exclude={"password"})
            user = User(
                **fields,
                password=hash_password(user_data.password),
                profile_image=image_key
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"User created: {user.email} ({user.user_id})")
            return user

        except IntegrityError:
            self.db.rollback()
            self._discard_image(image_key)
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="The email has already been taken."
            )
        except Exception:
            self.db.rollback()
            self._discard_image(image_key)
            logger.exception("Error creating user")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating user"
            )

    def update_user(self, user_id: int, update_data: UserUpdate, image: Optional[UploadFile] = None) -> User:
        user = self.get_user_by_id(user_id)
        self._validate_role(update_data.role_id)
        self._validate_unique_email(update_data.email, exclude_id=user_id)

        image_key = self._store_image(image)
        old_image = user.profile_image
        try:
            for field, value in update_data.model_dump(exclude={"password"}).items():
                setattr(user, field, value)

            # Only update password if provided
            if update_data.password:
                user.password = hash_password(update_data.password)

            if image_key:
                user.profile_image = image_key

            self.db.commit()
            self.db.refresh(user)

        except Exception:
            self.db.rollback()
            self._discard_image(image_key)
            logger.exception(f"Error updating user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating user"
            )

        if image_key and old_image:
            self._discard_image(old_image)
        return user

    def delete_user(self, user_id: int) -> Dict[str, str]:
        """Delete a user unless orders reference them."""
        user = self.get_user_by_id(user_id)

        order_count = self.db.query(Order).filter(Order.user_id == user_id).count()
        if order_count > 0:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Cannot delete user because they have associated orders"
            )

        image_key = user.profile_image
        try:
            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error deleting user"
            )

        self._discard_image(image_key)
        logger.info(f"User deleted: {user_id}")
        return {"message": "User deleted successfully"}

    def _discard_image(self, key: Optional[str]):
        if key and self.storage is not None:
            self.storage.delete(key)
