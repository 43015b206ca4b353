"""
SQLAlchemy models for the orders module

- Order: sale header with totals computed once at placement time
- OrderItem: one product line with the unit price frozen at sale time

Stock is decremented when an order is placed and restored when it is cancelled.
"""

from snackhub.database.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Enum
from sqlalchemy.orm import relationship
from snackhub.common.mixins import TimestampMixin
import enum


class OrderStatus(enum.Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(enum.Enum):
    CASH = "cash"
    CARD = "card"
    E_WALLET = "e_wallet"


def _enum_values(enum_cls):
    return [m.value for m in enum_cls]


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True, index=True)  # Cashier
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    payment_method = Column(
        Enum(PaymentMethod, values_callable=_enum_values), nullable=False, default=PaymentMethod.CASH
    )

    # Totals
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)  # Percent, 0-100
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=False)
    change_amount = Column(Numeric(10, 2), nullable=False)

    status = Column(
        Enum(OrderStatus, values_callable=_enum_values),
        nullable=False,
        default=OrderStatus.COMPLETED,
        index=True
    )

    # Relationships
    user = relationship("User", back_populates="orders")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.order_item_id"
    )
    feedbacks = relationship("Feedback", back_populates="order")


class OrderItem(Base, TimestampMixin):
    __tablename__ = "order_items"

    order_item_id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # Unit price at sale time
    subtotal = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="order_items")
    product = relationship("Product", back_populates="order_items", lazy="joined")

    @property
    def product_name(self):
        return self.product.product_name if self.product else None
