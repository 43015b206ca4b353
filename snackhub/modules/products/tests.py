"""
Tests for the products module
"""
from decimal import Decimal

from snackhub.modules.orders.models import Order, OrderItem, OrderStatus, PaymentMethod
from snackhub.modules.products.models import Product


def _sell(db_session, product, quantity=1):
    order = Order(
        payment_method=PaymentMethod.CASH,
        subtotal=product.price * quantity,
        tax_amount=Decimal("0.00"),
        discount=Decimal("0"),
        discount_amount=Decimal("0.00"),
        total_amount=product.price * quantity,
        amount_paid=product.price * quantity,
        change_amount=Decimal("0.00"),
        status=OrderStatus.COMPLETED,
    )
    db_session.add(order)
    db_session.flush()
    db_session.add(OrderItem(
        order_id=order.order_id,
        product_id=product.product_id,
        quantity=quantity,
        price=product.price,
        subtotal=product.price * quantity,
    ))
    db_session.commit()


class TestLoadProducts:

    def test_public_listing(self, client, make_product):
        make_product(name="Chips")
        make_product(name="Soda")

        response = client.get("/api/loadProducts")

        assert response.status_code == 200
        assert [p["product_name"] for p in response.json()["products"]] == ["Chips", "Soda"]


class TestStoreProduct:

    def test_create_product(self, client, manager_headers):
        response = client.post(
            "/api/storeProduct",
            data={"productName": "Pretzels", "price": "22.50", "quantity": "40"},
            headers=manager_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["product_name"] == "Pretzels"
        assert Decimal(body["price"]) == Decimal("22.50")
        assert body["quantity"] == 40
        assert body["product_picture_url"] is None

    def test_create_product_with_image(self, client, admin_headers, image_storage):
        response = client.post(
            "/api/storeProduct",
            data={"productName": "Gummies", "price": "15", "quantity": "12"},
            files={"productImage": ("gummies.gif", b"GIF89a", "image/gif")},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["product_picture"] == "uploads/products/test/gummies.gif"

    def test_negative_values_are_rejected(self, client, admin_headers):
        response = client.post(
            "/api/storeProduct",
            data={"productName": "Bad", "price": "-1", "quantity": "-5"},
            headers=admin_headers,
        )
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert "price" in errors
        assert "quantity" in errors

    def test_cashier_cannot_manage_products(self, client, cashier_headers):
        response = client.post(
            "/api/storeProduct",
            data={"productName": "Nope", "price": "1", "quantity": "1"},
            headers=cashier_headers,
        )
        assert response.status_code == 403


class TestUpdateProduct:

    def test_update_price_and_restock(self, client, manager_headers, make_product, db_session):
        product = make_product(name="Chips", price="35.00", quantity=2)

        response = client.put(
            f"/api/updateProduct/{product.product_id}",
            data={"productName": "Chips XL", "price": "45.00", "quantity": "30"},
            headers=manager_headers,
        )

        assert response.status_code == 200
        db_session.refresh(product)
        assert product.product_name == "Chips XL"
        assert product.price == Decimal("45.00")
        assert product.quantity == 30

    def test_update_missing_product(self, client, manager_headers):
        response = client.put(
            "/api/updateProduct/999",
            data={"productName": "Ghost", "price": "1", "quantity": "1"},
            headers=manager_headers,
        )
        assert response.status_code == 404


class TestDeleteProduct:

    def test_delete_product(self, client, admin_headers, make_product, db_session):
        product_id = make_product().product_id

        response = client.delete(f"/api/deleteProduct/{product_id}", headers=admin_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(Product, product_id) is None

    def test_sold_product_cannot_be_deleted(self, client, admin_headers, make_product, db_session):
        product = make_product()
        _sell(db_session, product)

        response = client.delete(f"/api/deleteProduct/{product.product_id}", headers=admin_headers)

        assert response.status_code == 422
        db_session.expire_all()
        assert db_session.get(Product, product.product_id) is not None
