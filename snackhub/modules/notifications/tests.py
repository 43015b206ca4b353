"""
Tests for order notifications (payload, dispatch and webhook task)
"""
from decimal import Decimal

import pytest
import requests

from snackhub.core.config import settings
from snackhub.modules.notifications import service as notification_service
from snackhub.modules.notifications import tasks
from snackhub.modules.orders.models import Order, OrderItem, OrderStatus, PaymentMethod


@pytest.fixture
def placed_order(db_session, make_product):
    product = make_product(name="Iced Tea", price="40.00", quantity=5)
    order = Order(
        customer_name="Ana",
        customer_email="ana@snackhub.com",
        payment_method=PaymentMethod.CASH,
        subtotal=Decimal("80.00"),
        tax_amount=Decimal("9.60"),
        discount=Decimal("0"),
        discount_amount=Decimal("0.00"),
        total_amount=Decimal("89.60"),
        amount_paid=Decimal("100.00"),
        change_amount=Decimal("10.40"),
        status=OrderStatus.COMPLETED,
    )
    db_session.add(order)
    db_session.flush()
    db_session.add(OrderItem(
        order_id=order.order_id,
        product_id=product.product_id,
        quantity=2,
        price=Decimal("40.00"),
        subtotal=Decimal("80.00"),
    ))
    db_session.commit()
    db_session.refresh(order)
    return order


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class TestOrderPayload:

    def test_payload_contains_items_and_feedback_link(self, placed_order, monkeypatch):
        monkeypatch.setattr(settings, "FRONTEND_URL", "https://shop.snackhub.com/")

        payload = notification_service.build_order_payload(placed_order)

        assert payload["order_id"] == placed_order.order_id
        assert payload["customer_email"] == "ana@snackhub.com"
        assert payload["total_amount"] == "89.60"
        assert payload["order_items"] == [
            {"product_name": "Iced Tea", "quantity": 2, "price": "40.00", "subtotal": "80.00"}
        ]
        assert payload["feedback_link"] == f"https://shop.snackhub.com/feedback/{placed_order.order_id}"


class TestNotifyOrderPlaced:

    def test_skipped_without_webhook_url(self, placed_order, monkeypatch):
        monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", None)
        assert notification_service.notify_order_placed(placed_order) is False

    def test_queues_task(self, placed_order, monkeypatch):
        queued = []

        class RecordingTask:
            def delay(self, payload):
                queued.append(payload)

        monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", "http://hooks.snackhub.com/orders")
        monkeypatch.setattr(notification_service, "send_order_webhook_task", RecordingTask())

        assert notification_service.notify_order_placed(placed_order) is True
        assert queued[0]["order_id"] == placed_order.order_id

    def test_enqueue_errors_are_swallowed(self, placed_order, monkeypatch):
        class BrokenTask:
            def delay(self, payload):
                raise ConnectionError("redis unavailable")

        monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", "http://hooks.snackhub.com/orders")
        monkeypatch.setattr(notification_service, "send_order_webhook_task", BrokenTask())

        assert notification_service.notify_order_placed(placed_order) is False


class TestWebhookTask:

    def test_posts_payload(self, monkeypatch):
        calls = []

        def fake_post(url, json=None, headers=None, timeout=None):
            calls.append((url, json, timeout))
            return FakeResponse(200)

        monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", "http://hooks.snackhub.com/orders")
        monkeypatch.setattr(tasks.requests, "post", fake_post)

        result = tasks.send_order_webhook_task.apply(args=[{"order_id": 7}]).get()

        assert result == {"status": "success", "order_id": 7, "status_code": 200}
        assert calls == [("http://hooks.snackhub.com/orders", {"order_id": 7}, settings.WEBHOOK_TIMEOUT)]

    def test_skips_when_unconfigured(self, monkeypatch):
        monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", None)

        result = tasks.send_order_webhook_task.apply(args=[{"order_id": 7}]).get()

        assert result["status"] == "skipped"
