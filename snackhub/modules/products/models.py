from snackhub.database.database import Base
from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from snackhub.common.mixins import TimestampMixin


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, autoincrement=True)
    product_name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)  # Stock on hand
    product_picture = Column(String(500), nullable=True)  # Storage key, e.g. uploads/products/...

    # Relationships
    order_items = relationship("OrderItem", back_populates="product")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_product_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )
