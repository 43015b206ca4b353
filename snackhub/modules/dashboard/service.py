"""
Dashboard summary

Headline counts, completed-order revenue, low-stock products, the latest
orders and a seven-day revenue series.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from snackhub.core.config import settings
from snackhub.modules.orders.calculator import to_money
from snackhub.modules.orders.models import Order, OrderStatus
from snackhub.modules.products.models import Product
from snackhub.modules.users.models import User

RECENT_ORDERS_LIMIT = 5
REVENUE_DAYS = 7


class DashboardService:

    def __init__(self, db: Session):
        self.db = db

    def _completed_orders(self):
        return self.db.query(Order).filter(Order.status == OrderStatus.COMPLETED)

    def total_revenue(self) -> Decimal:
        revenue = self._completed_orders().with_entities(func.sum(Order.total_amount)).scalar()
        return to_money(revenue or 0)

    def low_stock_products(self) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.quantity < settings.LOW_STOCK_THRESHOLD)
            .order_by(Product.quantity, Product.product_id)
            .all()
        )

    def recent_orders(self) -> List[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.user))
            .order_by(Order.created_at.desc(), Order.order_id.desc())
            .limit(RECENT_ORDERS_LIMIT)
            .all()
        )

    def daily_revenue(self, today=None) -> List[Dict]:
        """Revenue per calendar day (UTC), oldest first, zero-filled."""
        today = today or datetime.now(timezone.utc).date()
        first_day = today - timedelta(days=REVENUE_DAYS - 1)
        since = datetime.combine(first_day, datetime.min.time(), tzinfo=timezone.utc)

        buckets = {first_day + timedelta(days=i): Decimal("0") for i in range(REVENUE_DAYS)}
        rows = (
            self._completed_orders()
            .filter(Order.created_at >= since)
            .with_entities(Order.created_at, Order.total_amount)
            .all()
        )
        for created_at, total_amount in rows:
            day = created_at.date()
            if day in buckets:
                buckets[day] += Decimal(str(total_amount))

        return [{"day": day, "revenue": to_money(amount)} for day, amount in sorted(buckets.items())]

    def get_summary(self) -> Dict:
        return {
            "total_users": self.db.query(func.count(User.user_id)).scalar(),
            "total_products": self.db.query(func.count(Product.product_id)).scalar(),
            "total_orders": self.db.query(func.count(Order.order_id)).scalar(),
            "total_revenue": self.total_revenue(),
            "low_stock_threshold": settings.LOW_STOCK_THRESHOLD,
            "low_stock_products": self.low_stock_products(),
            "recent_orders": self.recent_orders(),
            "daily_revenue": self.daily_revenue(),
        }
