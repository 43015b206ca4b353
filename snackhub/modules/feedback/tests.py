"""
Tests for public feedback submission and the feedback list
"""
from decimal import Decimal

import pytest
from sqlalchemy.orm import Query

from snackhub.core.config import settings
from snackhub.modules.feedback.models import Feedback
from snackhub.modules.orders.models import Order, OrderStatus, PaymentMethod


@pytest.fixture
def order(db_session):
    order = Order(
        customer_name="Walk-in",
        payment_method=PaymentMethod.CARD,
        subtotal=Decimal("100.00"),
        tax_amount=Decimal("12.00"),
        discount=Decimal("0"),
        discount_amount=Decimal("0.00"),
        total_amount=Decimal("112.00"),
        amount_paid=Decimal("112.00"),
        change_amount=Decimal("0.00"),
        status=OrderStatus.COMPLETED,
    )
    db_session.add(order)
    db_session.commit()
    return order


class TestSubmitFeedback:

    def test_public_submission(self, client, order, db_session):
        response = client.post(
            "/api/feedback",
            json={"order_id": order.order_id, "rating": 5, "comment": "Fast service", "email": "fan@snackhub.com"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Feedback submitted successfully"}
        feedback = db_session.query(Feedback).one()
        assert feedback.rating == 5
        assert feedback.order_id == order.order_id

    def test_rating_and_comment_are_optional(self, client, order):
        response = client.post("/api/feedback", json={"order_id": order.order_id})
        assert response.status_code == 200

    def test_unknown_order(self, client):
        response = client.post("/api/feedback", json={"order_id": 404, "rating": 3})
        assert response.status_code == 422
        assert response.json()["message"] == "The selected order id is invalid."

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, client, order, rating):
        response = client.post("/api/feedback", json={"order_id": order.order_id, "rating": rating})
        assert response.status_code == 422
        assert "rating" in response.json()["errors"]

    def test_comment_too_long(self, client, order):
        response = client.post("/api/feedback", json={"order_id": order.order_id, "comment": "x" * 1001})
        assert response.status_code == 422

    def test_unlimited_submissions_by_default(self, client, order, db_session):
        for _ in range(3):
            assert client.post("/api/feedback", json={"order_id": order.order_id}).status_code == 200
        assert db_session.query(Feedback).count() == 3

    def test_configured_cap_per_order(self, client, order, monkeypatch, db_session):
        monkeypatch.setattr(settings, "FEEDBACK_MAX_PER_ORDER", 1)

        first = client.post("/api/feedback", json={"order_id": order.order_id, "rating": 4})
        second = client.post("/api/feedback", json={"order_id": order.order_id, "rating": 1})

        assert first.status_code == 200
        assert second.status_code == 429
        assert db_session.query(Feedback).count() == 1

    def test_order_row_is_locked_before_counting(self, client, order, monkeypatch):
        locked = []
        original = Query.with_for_update

        def recording_lock(query, *args, **kwargs):
            locked.extend(d["entity"] for d in query.column_descriptions)
            return original(query, *args, **kwargs)

        monkeypatch.setattr(Query, "with_for_update", recording_lock)
        monkeypatch.setattr(settings, "FEEDBACK_MAX_PER_ORDER", 1)

        response = client.post("/api/feedback", json={"order_id": order.order_id})

        assert response.status_code == 200
        assert Order in locked


class TestLoadFeedbacks:

    def test_manager_sees_feedback_with_order(self, client, manager_headers, order):
        client.post("/api/feedback", json={"order_id": order.order_id, "rating": 4})

        response = client.get("/api/loadFeedbacks", headers=manager_headers)

        assert response.status_code == 200
        feedbacks = response.json()["feedbacks"]
        assert len(feedbacks) == 1
        assert feedbacks[0]["order"]["order_id"] == order.order_id

    def test_cashier_is_forbidden(self, client, cashier_headers):
        assert client.get("/api/loadFeedbacks", headers=cashier_headers).status_code == 403
