from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List

from snackhub.modules.orders.schemas import OrderOut
from snackhub.modules.products.schemas import ProductOut


class DailyRevenue(BaseModel):
    day: date
    revenue: Decimal


class DashboardSummary(BaseModel):
    total_users: int
    total_products: int
    total_orders: int
    total_revenue: Decimal
    low_stock_threshold: int
    low_stock_products: List[ProductOut]
    recent_orders: List[OrderOut]
    daily_revenue: List[DailyRevenue]
