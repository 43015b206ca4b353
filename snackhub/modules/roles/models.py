from snackhub.database.database import Base
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from snackhub.common.mixins import TimestampMixin


class Role(Base, TimestampMixin):
    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(55), unique=True, nullable=False)
    description = Column(String(255), nullable=True)

    # Relationships
    users = relationship("User", back_populates="role")
