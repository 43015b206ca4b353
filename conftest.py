"""
Shared pytest fixtures.

The suite runs against a throwaway SQLite file; DATABASE_URL must be set
before anything under snackhub is imported.
"""
import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="snackhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ.pop("ORDER_WEBHOOK_URL", None)

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from snackhub.main import app
from snackhub.database.database import Base, SessionLocal, engine
from snackhub.modules.access.permissions import ADMIN, MANAGER, CASHIER
from snackhub.modules.auth.utils import create_access_token, hash_password
from snackhub.modules.files.service import get_image_storage, validate_image
from snackhub.modules.products.models import Product
from snackhub.modules.roles.models import Role
from snackhub.modules.users.models import User, Gender

TEST_PASSWORD = "password123"


class FakeImageStorage:
    """Records uploads instead of talking to MinIO."""

    def __init__(self):
        self.saved = []
        self.deleted = []

    def save_image(self, folder, upload):
        validate_image(upload)
        key = f"uploads/{folder}/test/{upload.filename}"
        self.saved.append(key)
        return key

    def delete(self, key):
        if key:
            self.deleted.append(key)
        return bool(key)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def image_storage():
    return FakeImageStorage()


@pytest.fixture
def client(image_storage):
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def roles(db_session):
    created = {}
    for name in (ADMIN, MANAGER, CASHIER):
        role = Role(role_name=name, description=f"{name} role")
        db_session.add(role)
        created[name] = role
    db_session.commit()
    return created


@pytest.fixture
def make_user(db_session, roles):
    counter = {"n": 0}

    def _make_user(role_name=CASHIER, email=None, password=TEST_PASSWORD, role=None):
        counter["n"] += 1
        user = User(
            first_name="Test",
            last_name=f"User{counter['n']}",
            age="25",
            gender=Gender.FEMALE,
            contact="09170000000",
            address="Main Street",
            email=email or f"user{counter['n']}@snackhub.com",
            password=hash_password(password),
            role_id=(role or roles[role_name]).role_id,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


def auth_headers_for(user):
    token = create_access_token({"sub": str(user.user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(make_user):
    return make_user(ADMIN, email="admin@snackhub.com")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers_for(admin_user)


@pytest.fixture
def manager_headers(make_user):
    return auth_headers_for(make_user(MANAGER, email="manager@snackhub.com"))


@pytest.fixture
def cashier_user(make_user):
    return make_user(CASHIER, email="cashier@snackhub.com")


@pytest.fixture
def cashier_headers(cashier_user):
    return auth_headers_for(cashier_user)


@pytest.fixture
def make_product(db_session):

    def _make_product(name="Potato Chips", price="50.00", quantity=10):
        product = Product(product_name=name, price=Decimal(price), quantity=quantity)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def headers_for():
    return auth_headers_for


@pytest.fixture
def user_password():
    return TEST_PASSWORD
