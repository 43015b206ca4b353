"""
Tests for the dashboard summary
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

from snackhub.modules.dashboard.service import DashboardService
from snackhub.modules.orders.models import Order, OrderStatus, PaymentMethod


def _order(db_session, total, status=OrderStatus.COMPLETED, created_at=None):
    order = Order(
        payment_method=PaymentMethod.CASH,
        subtotal=Decimal(total),
        tax_amount=Decimal("0.00"),
        discount=Decimal("0"),
        discount_amount=Decimal("0.00"),
        total_amount=Decimal(total),
        amount_paid=Decimal(total),
        change_amount=Decimal("0.00"),
        status=status,
    )
    if created_at is not None:
        order.created_at = created_at
    db_session.add(order)
    db_session.commit()
    return order


class TestDashboardService:

    def test_revenue_counts_completed_orders_only(self, db_session):
        _order(db_session, "112.00")
        _order(db_session, "50.00", status=OrderStatus.CANCELLED)

        assert DashboardService(db_session).total_revenue() == Decimal("112.00")

    def test_low_stock_products(self, db_session, make_product):
        make_product(name="Plenty", quantity=50)
        make_product(name="Almost out", quantity=3)
        make_product(name="Edge", quantity=10)

        names = [p.product_name for p in DashboardService(db_session).low_stock_products()]

        assert names == ["Almost out"]

    def test_daily_revenue_is_zero_filled(self, db_session):
        today = date(2026, 3, 10)
        _order(db_session, "20.00", created_at=datetime(2026, 3, 10, 9, 0))
        _order(db_session, "30.00", created_at=datetime(2026, 3, 10, 15, 0))
        _order(db_session, "15.00", created_at=datetime(2026, 3, 8, 12, 0))
        _order(db_session, "99.00", created_at=datetime(2026, 3, 1, 12, 0))

        series = DashboardService(db_session).daily_revenue(today=today)

        assert len(series) == 7
        assert series[0]["day"] == today - timedelta(days=6)
        assert series[-1] == {"day": today, "revenue": Decimal("50.00")}
        assert {"day": date(2026, 3, 8), "revenue": Decimal("15.00")} in series
        assert sum(point["revenue"] for point in series) == Decimal("65.00")


class TestDashboardEndpoint:

    def test_summary(self, client, cashier_headers, make_product, db_session):
        make_product(quantity=2)
        _order(db_session, "112.00")

        response = client.get("/api/dashboard", headers=cashier_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total_products"] == 1
        assert body["total_orders"] == 1
        assert body["total_users"] >= 1
        assert Decimal(body["total_revenue"]) == Decimal("112.00")
        assert len(body["low_stock_products"]) == 1
        assert len(body["recent_orders"]) == 1
        assert len(body["daily_revenue"]) == 7

    def test_requires_authentication(self, client):
        assert client.get("/api/dashboard").status_code in (401, 403)
