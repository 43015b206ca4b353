"""
Tests for the orders module

Covers:
- Totals formula and the worked example (100 + 12 tax = 112, change 38)
- Server-side prices (client prices and totals are ignored)
- Atomic failure on insufficient stock
- Two concurrent checkouts for the last unit
- Cancellation with restock, and double cancellation
"""
import threading
from decimal import Decimal

import pytest
from fastapi import HTTPException

from snackhub.database.database import SessionLocal
from snackhub.modules.orders import service as order_service_module
from snackhub.modules.orders.calculator import compute_totals, TAX_RATE
from snackhub.modules.orders.models import Order, OrderItem, OrderStatus
from snackhub.modules.orders.schemas import OrderCreate, OrderItemIn
from snackhub.modules.orders.service import OrderService, merge_lines
from snackhub.modules.products.models import Product


def _order_payload(items, amount_paid="150", discount=0, **extra):
    payload = {
        "customerName": "Walk-in",
        "items": items,
        "paymentMethod": "cash",
        "discount": discount,
        "amountPaid": amount_paid,
    }
    payload.update(extra)
    return payload


# ===== TOTALS =====

class TestComputeTotals:
    """Tests for the totals formula"""

    def test_worked_example(self):
        """Test cart [50 x 2] with no discount"""
        totals = compute_totals([(Decimal("50"), 2)], 0)
        assert totals.subtotal == Decimal("100.00")
        assert totals.tax_amount == Decimal("12.00")
        assert totals.discount_amount == Decimal("0.00")
        assert totals.total_amount == Decimal("112.00")
        assert totals.change_for(Decimal("150")) == Decimal("38.00")

    def test_tax_rate_is_twelve_percent(self):
        assert TAX_RATE == Decimal("0.12")

    def test_discount_applies_to_subtotal_plus_tax(self):
        totals = compute_totals([(Decimal("50"), 2)], 10)
        assert totals.discount_amount == Decimal("11.20")
        assert totals.total_amount == Decimal("100.80")
        assert totals.subtotal + totals.tax_amount - totals.discount_amount == totals.total_amount

    def test_full_discount_never_goes_negative(self):
        totals = compute_totals([(Decimal("19.99"), 3)], 100)
        assert totals.total_amount == Decimal("0.00")

    def test_discount_out_of_range(self):
        with pytest.raises(ValueError):
            compute_totals([(Decimal("10"), 1)], 101)

    def test_merge_lines_collapses_repeated_products(self):
        items = [
            OrderItemIn(product_id=1, quantity=2),
            OrderItemIn(product_id=2, quantity=1),
            OrderItemIn(product_id=1, quantity=3),
        ]
        assert merge_lines(items) == {1: 5, 2: 1}


# ===== PLACING ORDERS =====

class TestPlaceOrder:
    """Tests for POST /api/storeOrder"""

    def test_place_order_example(self, client, cashier_headers, cashier_user, make_product, db_session):
        """Test the worked example end to end, including stock decrement"""
        product = make_product(price="50.00", quantity=10)

        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 2}]),
            headers=cashier_headers,
        )

        assert response.status_code == 201
        order = response.json()["order"]
        assert Decimal(order["subtotal"]) == Decimal("100.00")
        assert Decimal(order["tax_amount"]) == Decimal("12.00")
        assert Decimal(order["total_amount"]) == Decimal("112.00")
        assert Decimal(order["change_amount"]) == Decimal("38.00")
        assert order["status"] == "completed"
        assert order["user_id"] == cashier_user.user_id
        assert order["order_items"][0]["product_name"] == "Potato Chips"

        db_session.refresh(product)
        assert product.quantity == 8

    def test_client_prices_and_total_are_ignored(self, client, cashier_headers, make_product):
        product = make_product(price="50.00", quantity=10)

        response = client.post(
            "/api/storeOrder",
            json=_order_payload(
                [{"productId": product.product_id, "quantity": 1, "price": "1.00"}],
                total="1.12",
            ),
            headers=cashier_headers,
        )

        assert response.status_code == 201
        order = response.json()["order"]
        assert Decimal(order["order_items"][0]["price"]) == Decimal("50.00")
        assert Decimal(order["total_amount"]) == Decimal("56.00")

    def test_item_price_is_frozen_at_sale_time(self, client, cashier_headers, make_product, db_session):
        product = make_product(price="50.00", quantity=10)
        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 1}]),
            headers=cashier_headers,
        )
        order_id = response.json()["order"]["order_id"]

        product.price = Decimal("99.00")
        db_session.commit()

        item = db_session.query(OrderItem).filter(OrderItem.order_id == order_id).one()
        assert item.price == Decimal("50.00")

    def test_insufficient_stock_leaves_no_trace(self, client, cashier_headers, make_product, db_session):
        """Test that a short line aborts the whole order"""
        chips = make_product(name="Chips", quantity=5)
        soda = make_product(name="Soda", quantity=1)

        response = client.post(
            "/api/storeOrder",
            json=_order_payload(
                [
                    {"productId": chips.product_id, "quantity": 2},
                    {"productId": soda.product_id, "quantity": 3},
                ],
                amount_paid="1000",
            ),
            headers=cashier_headers,
        )

        assert response.status_code == 422
        assert "Soda" in response.json()["message"]

        db_session.expire_all()
        assert db_session.get(Product, chips.product_id).quantity == 5
        assert db_session.get(Product, soda.product_id).quantity == 1
        assert db_session.query(Order).count() == 0
        assert db_session.query(OrderItem).count() == 0

    def test_underpayment_is_rejected(self, client, cashier_headers, make_product, db_session):
        product = make_product(price="50.00", quantity=10)

        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 2}], amount_paid="100"),
            headers=cashier_headers,
        )

        assert response.status_code == 422
        db_session.refresh(product)
        assert product.quantity == 10
        assert db_session.query(Order).count() == 0

    def test_unknown_product(self, client, cashier_headers):
        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": 999, "quantity": 1}]),
            headers=cashier_headers,
        )
        assert response.status_code == 404

    def test_empty_cart_is_a_validation_error(self, client, cashier_headers):
        response = client.post("/api/storeOrder", json=_order_payload([]), headers=cashier_headers)
        assert response.status_code == 422
        assert "items" in response.json()["errors"]

    def test_requires_authentication(self, client, make_product):
        product = make_product()
        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 1}]),
        )
        assert response.status_code in (401, 403)

    def test_webhook_is_queued_after_commit(self, client, cashier_headers, make_product, monkeypatch):
        announced = []
        monkeypatch.setattr(order_service_module, "notify_order_placed", lambda order: announced.append(order.order_id))
        product = make_product(quantity=3)

        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 1}], amount_paid="100"),
            headers=cashier_headers,
        )

        assert response.status_code == 201
        assert announced == [response.json()["order"]["order_id"]]

    def test_webhook_failure_does_not_fail_the_order(self, client, cashier_headers, make_product, monkeypatch):
        class BrokenTask:
            def delay(self, payload):
                raise RuntimeError("broker down")

        from snackhub.modules.notifications import service as notification_service
        from snackhub.core.config import settings

        monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", "http://hooks.snackhub.com/orders")
        monkeypatch.setattr(notification_service, "send_order_webhook_task", BrokenTask())
        product = make_product(quantity=3)

        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 1}], amount_paid="100"),
            headers=cashier_headers,
        )

        assert response.status_code == 201


# ===== CONCURRENCY =====

class TestConcurrentCheckout:
    """Two checkouts racing for the last unit"""

    def test_exactly_one_of_two_orders_wins(self, make_product, db_session):
        product = make_product(quantity=1)
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def checkout():
            session = SessionLocal()
            try:
                data = OrderCreate(
                    items=[OrderItemIn(product_id=product.product_id, quantity=1)],
                    amount_paid=Decimal("100"),
                )
                barrier.wait()
                OrderService(session).place_order(data)
                result = "ok"
            except HTTPException as e:
                result = e.status_code
            finally:
                session.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=checkout) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert sorted(outcomes, key=str) == sorted(["ok", 422], key=str)

        db_session.expire_all()
        assert db_session.get(Product, product.product_id).quantity == 0
        assert db_session.query(Order).count() == 1


# ===== CANCELLATION =====

class TestCancelOrder:
    """Tests for PUT /api/cancelOrder/{id}"""

    def _place(self, client, headers, product, quantity=2):
        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": quantity}], amount_paid="1000"),
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()["order"]["order_id"]

    def test_cancel_restores_stock(self, client, cashier_headers, make_product, db_session):
        product = make_product(quantity=10)
        order_id = self._place(client, cashier_headers, product, quantity=4)

        response = client.put(f"/api/cancelOrder/{order_id}", headers=cashier_headers)

        assert response.status_code == 200
        assert response.json()["order"]["status"] == "cancelled"
        db_session.expire_all()
        assert db_session.get(Product, product.product_id).quantity == 10
        assert db_session.get(Order, order_id).status == OrderStatus.CANCELLED

    def test_cancel_twice_fails(self, client, cashier_headers, make_product, db_session):
        product = make_product(quantity=10)
        order_id = self._place(client, cashier_headers, product, quantity=4)
        client.put(f"/api/cancelOrder/{order_id}", headers=cashier_headers)

        response = client.put(f"/api/cancelOrder/{order_id}", headers=cashier_headers)

        assert response.status_code == 422
        db_session.expire_all()
        assert db_session.get(Product, product.product_id).quantity == 10

    def test_cancel_missing_order(self, client, cashier_headers):
        response = client.put("/api/cancelOrder/4242", headers=cashier_headers)
        assert response.status_code == 404


# ===== HISTORY =====

class TestOrderHistory:

    def test_load_orders_newest_first(self, client, cashier_headers, make_product):
        product = make_product(quantity=10)
        ids = []
        for _ in range(2):
            response = client.post(
                "/api/storeOrder",
                json=_order_payload([{"productId": product.product_id, "quantity": 1}], amount_paid="100"),
                headers=cashier_headers,
            )
            ids.append(response.json()["order"]["order_id"])

        response = client.get("/api/loadOrders")

        assert response.status_code == 200
        assert [o["order_id"] for o in response.json()["orders"]] == list(reversed(ids))

    def test_get_order_receipt(self, client, cashier_headers, make_product):
        product = make_product(name="Cheese Puffs", price="30.00", quantity=10)
        response = client.post(
            "/api/storeOrder",
            json=_order_payload([{"productId": product.product_id, "quantity": 3}], amount_paid="200"),
            headers=cashier_headers,
        )
        order_id = response.json()["order"]["order_id"]

        response = client.get(f"/api/getOrder/{order_id}", headers=cashier_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["order_items"][0]["product_name"] == "Cheese Puffs"
        assert Decimal(body["order_items"][0]["subtotal"]) == Decimal("90.00")

    def test_get_missing_order(self, client, cashier_headers):
        assert client.get("/api/getOrder/999", headers=cashier_headers).status_code == 404

    def test_receipt_requires_login(self, client, cashier_headers, make_product):
        product = make_product(quantity=10)
        response = client.post(
            "/api/storeOrder",
            json=_order_payload(
                [{"productId": product.product_id, "quantity": 1}],
                amount_paid="100",
                customerEmail="ana@snackhub.com",
            ),
            headers=cashier_headers,
        )
        order_id = response.json()["order"]["order_id"]

        response = client.get(f"/api/getOrder/{order_id}")

        assert response.status_code in (401, 403)
        assert "ana@snackhub.com" not in response.text
