from sqlalchemy import Column, Integer, String, ForeignKey, Enum
from sqlalchemy.orm import relationship
from snackhub.database.database import Base
from snackhub.common.mixins import TimestampMixin
import enum


class Gender(enum.Enum):
    FEMALE = "female"
    MALE = "male"
    OTHERS = "others"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    profile_image = Column(String(500), nullable=True)  # Storage key, e.g. uploads/users/...
    first_name = Column(String(55), nullable=False)
    middle_name = Column(String(55), nullable=True)
    last_name = Column(String(55), nullable=False)
    suffix_name = Column(String(55), nullable=True)
    age = Column(String(10), nullable=False)
    gender = Column(Enum(Gender, values_callable=lambda e: [m.value for m in e]), nullable=False)
    contact = Column(String(55), nullable=False)
    address = Column(String(255), nullable=False)
    email = Column(String(55), unique=True, nullable=False)
    password = Column(String(255), nullable=False)

    role_id = Column(Integer, ForeignKey("roles.role_id"), nullable=False, index=True)

    # Relationships
    role = relationship("Role", back_populates="users", lazy="joined")
    orders = relationship("Order", back_populates="user")
