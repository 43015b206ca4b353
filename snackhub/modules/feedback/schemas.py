from pydantic import BaseModel, EmailStr, Field, ConfigDict
from decimal import Decimal
from typing import Optional, List
from datetime import datetime

from snackhub.modules.orders.models import OrderStatus


class FeedbackCreate(BaseModel):
    order_id: int
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)
    email: Optional[EmailStr] = None


class FeedbackOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: int
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    total_amount: Decimal
    status: OrderStatus
    created_at: Optional[datetime] = None


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    feedback_id: int
    order_id: int
    rating: Optional[int] = None
    comment: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    order: Optional[FeedbackOrderOut] = None


class FeedbackList(BaseModel):
    feedbacks: List[FeedbackOut]
