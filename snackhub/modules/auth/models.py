from sqlalchemy import Column, Integer, String, DateTime
from snackhub.database.database import Base
from snackhub.common.mixins import TimestampMixin


class RevokedToken(Base, TimestampMixin):
    """Bearer tokens invalidated by logout before their natural expiry."""
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    jti = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
