"""
Tests for the users module

Covers multipart create/update, image handling, role guards and the
delete guard for users that have orders.
"""
from decimal import Decimal

from snackhub.modules.orders.models import Order, OrderStatus, PaymentMethod
from snackhub.modules.users.models import User
from snackhub.modules.auth.utils import verify_password


def _user_form(roles, **overrides):
    form = {
        "firstName": "Maria",
        "middleName": "",
        "lastName": "Santos",
        "suffixName": "",
        "age": "28",
        "gender": "female",
        "contact": "09171234567",
        "address": "123 Rizal Ave",
        "roleId": str(roles["Cashier"].role_id),
        "email": "maria@snackhub.com",
        "password": "secret-pass",
    }
    form.update(overrides)
    return form


def _order_for(db_session, user):
    order = Order(
        user_id=user.user_id,
        payment_method=PaymentMethod.CASH,
        subtotal=Decimal("10.00"),
        tax_amount=Decimal("1.20"),
        discount=Decimal("0"),
        discount_amount=Decimal("0.00"),
        total_amount=Decimal("11.20"),
        amount_paid=Decimal("20.00"),
        change_amount=Decimal("8.80"),
        status=OrderStatus.COMPLETED,
    )
    db_session.add(order)
    db_session.commit()
    return order


# ===== CREATE =====

class TestStoreUser:

    def test_create_user(self, client, admin_headers, roles, db_session):
        response = client.post("/api/storeUser", data=_user_form(roles), headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "maria@snackhub.com"
        assert body["middle_name"] is None
        assert body["role"]["role_name"] == "Cashier"
        assert "password" not in body

        user = db_session.query(User).filter(User.email == "maria@snackhub.com").one()
        assert verify_password("secret-pass", user.password)

    def test_create_user_with_profile_image(self, client, admin_headers, roles, image_storage):
        response = client.post(
            "/api/storeUser",
            data=_user_form(roles),
            files={"profileImage": ("me.png", b"\x89PNG fake", "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["profile_image"] == "uploads/users/test/me.png"
        assert body["profile_image_url"].endswith("/uploads/users/test/me.png")
        assert image_storage.saved == ["uploads/users/test/me.png"]

    def test_rejects_non_image_upload(self, client, admin_headers, roles):
        response = client.post(
            "/api/storeUser",
            data=_user_form(roles),
            files={"profileImage": ("notes.txt", b"hello", "text/plain")},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_duplicate_email(self, client, admin_headers, roles, admin_user):
        response = client.post(
            "/api/storeUser",
            data=_user_form(roles, email=admin_user.email),
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["message"] == "The email has already been taken."

    def test_unknown_role(self, client, admin_headers, roles):
        response = client.post("/api/storeUser", data=_user_form(roles, roleId="999"), headers=admin_headers)
        assert response.status_code == 422

    def test_missing_fields_are_reported_per_field(self, client, admin_headers, roles):
        response = client.post(
            "/api/storeUser",
            data=_user_form(roles, firstName="", password=""),
            headers=admin_headers,
        )
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert "first_name" in errors
        assert "password" in errors

    def test_only_admin_may_create(self, client, manager_headers, roles):
        response = client.post("/api/storeUser", data=_user_form(roles), headers=manager_headers)
        assert response.status_code == 403


# ===== UPDATE =====

class TestUpdateUser:

    def test_update_keeps_password_when_blank(self, client, admin_headers, roles, make_user, db_session):
        user = make_user(email="keep@snackhub.com")
        old_hash = user.password

        response = client.put(
            f"/api/updateUser/{user.user_id}",
            data=_user_form(roles, email="keep@snackhub.com", firstName="Renamed", password=""),
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["first_name"] == "Renamed"
        db_session.refresh(user)
        assert user.password == old_hash

    def test_replacing_image_deletes_old_one(self, client, admin_headers, roles, make_user, db_session, image_storage):
        user = make_user(email="pic@snackhub.com")
        user.profile_image = "uploads/users/old.png"
        db_session.commit()

        response = client.put(
            f"/api/updateUser/{user.user_id}",
            data=_user_form(roles, email="pic@snackhub.com", password=""),
            files={"profileImage": ("new.jpg", b"jpeg bytes", "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["profile_image"] == "uploads/users/test/new.jpg"
        assert image_storage.deleted == ["uploads/users/old.png"]

    def test_update_missing_user(self, client, admin_headers, roles):
        response = client.put("/api/updateUser/999", data=_user_form(roles), headers=admin_headers)
        assert response.status_code == 404


# ===== DELETE =====

class TestDeleteUser:

    def test_delete_user(self, client, admin_headers, make_user, db_session):
        user_id = make_user(email="bye@snackhub.com").user_id

        response = client.delete(f"/api/deleteUser/{user_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "User deleted successfully"
        db_session.expire_all()
        assert db_session.get(User, user_id) is None

    def test_user_with_orders_cannot_be_deleted(self, client, admin_headers, make_user, db_session):
        """Test the referential guard: the user must remain"""
        user = make_user(email="seller@snackhub.com")
        _order_for(db_session, user)

        response = client.delete(f"/api/deleteUser/{user.user_id}", headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["message"] == "Cannot delete user because they have associated orders"
        db_session.expire_all()
        assert db_session.get(User, user.user_id) is not None


# ===== LIST =====

class TestLoadUsers:

    def test_requires_authentication(self, client):
        assert client.get("/api/loadUsers").status_code in (401, 403)

    def test_lists_users_with_roles(self, client, cashier_headers, admin_user):
        response = client.get("/api/loadUsers", headers=cashier_headers)
        assert response.status_code == 200
        emails = {u["email"] for u in response.json()["users"]}
        assert {"admin@snackhub.com", "cashier@snackhub.com"} <= emails
