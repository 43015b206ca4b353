from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from datetime import datetime, timezone
from typing import Dict
import logging

from snackhub.core.config import settings
from snackhub.modules.auth.models import RevokedToken
from snackhub.modules.auth.schemas import TokenResponse, CurrentUserOut
from snackhub.modules.auth.utils import create_access_token, verify_password
from snackhub.modules.users.models import User

logger = logging.getLogger(__name__)


class AuthService:
    """Login and token revocation"""

    def __init__(self, db: Session):
        self.db = db

    def login(self, email: str, password: str) -> TokenResponse:
        """
        Exchange email and password for a bearer token.

        Bad credentials are reported as a validation error on the email field.
        """
        user = self.db.query(User).filter(User.email == email).first()

        if not user or not verify_password(password, user.password):
            logger.info(f"Failed login attempt for {email}")
            raise RequestValidationError([{
                "loc": ("body", "email"),
                "msg": "The provided credentials are incorrect.",
                "type": "value_error",
            }])

        token = create_access_token({"sub": str(user.user_id), "email": user.email})
        logger.info(f"User {user.user_id} logged in")

        return TokenResponse(
            token=token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=CurrentUserOut.model_validate(user)
        )

    def logout(self, payload: dict) -> Dict[str, str]:
        """Revoke the presented token until it would have expired anyway."""
        jti = payload.get("jti")
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        try:
            self.db.add(RevokedToken(jti=jti, user_id=int(payload["sub"]), expires_at=expires_at))
            self.db.commit()
        except IntegrityError:
            # Already revoked
            self.db.rollback()
        except Exception:
            self.db.rollback()
            logger.exception("Error revoking token")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error logging out"
            )

        self._purge_expired()
        return {"message": "Logged out successfully"}

    def _purge_expired(self):
        """Drop revocations whose tokens have expired on their own."""
        try:
            self.db.query(RevokedToken).filter(
                RevokedToken.expires_at < datetime.now(timezone.utc)
            ).delete(synchronize_session=False)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Could not purge expired revocations: {e}")
