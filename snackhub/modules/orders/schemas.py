from pydantic import BaseModel, EmailStr, Field, ConfigDict
from decimal import Decimal
from typing import Optional, List
from datetime import datetime

from snackhub.modules.orders.models import OrderStatus, PaymentMethod


class OrderItemIn(BaseModel):
    """A cart line; price is accepted from older clients but never trusted."""
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId")
    quantity: int = Field(..., ge=1)
    price: Optional[Decimal] = None


class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: Optional[str] = Field(None, alias="customerName", max_length=255)
    customer_email: Optional[EmailStr] = Field(None, alias="customerEmail")
    items: List[OrderItemIn] = Field(..., min_length=1)
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, alias="paymentMethod")
    discount: Decimal = Field(Decimal("0"), ge=0, le=100)
    amount_paid: Decimal = Field(..., alias="amountPaid", ge=0)
    total: Optional[Decimal] = None  # Ignored, recomputed server-side


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_item_id: int
    product_id: int
    quantity: int
    price: Decimal
    subtotal: Decimal
    product_name: Optional[str] = None


class CashierOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    first_name: str
    last_name: str
    email: str


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: int
    user_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    payment_method: PaymentMethod
    subtotal: Decimal
    tax_amount: Decimal
    discount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    change_amount: Decimal
    status: OrderStatus
    created_at: Optional[datetime] = None
    user: Optional[CashierOut] = None
    order_items: List[OrderItemOut] = []


class OrderResponse(BaseModel):
    message: str
    order: OrderOut


class OrderList(BaseModel):
    orders: List[OrderOut]
