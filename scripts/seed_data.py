"""
Seed script: roles, an admin account and a starter snack catalogue.

What it creates:
- Roles: Admin, Manager, Cashier.
- One user per role (Admin uses the credentials given on the command line).
- Products: a handful of snacks and drinks, a few of them below the low-stock
  threshold so the dashboard has something to show.
- Optionally a few demo orders placed through OrderService, so stock and totals
  follow the same rules as the POS.

Run inside the API container:
    docker compose exec api python scripts/seed_data.py \
        --email admin@snackhub.com --password SnackHub!2025 --orders 5

Note: This is intended for development environments only.
"""

# Add project root to sys.path so `snackhub.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import random
from decimal import Decimal

from snackhub.database.database import SessionLocal, engine, Base
from snackhub.modules.access.permissions import ADMIN, MANAGER, CASHIER
from snackhub.modules.auth.utils import hash_password
from snackhub.modules.roles.models import Role
from snackhub.modules.users.models import User, Gender
from snackhub.modules.products.models import Product
from snackhub.modules.orders.models import PaymentMethod
from snackhub.modules.orders.schemas import OrderCreate, OrderItemIn
from snackhub.modules.orders.service import OrderService
import snackhub.modules.auth.models  # noqa: F401
import snackhub.modules.feedback.models  # noqa: F401

ROLES = {
    ADMIN: "Full access to roles, users, products and feedback",
    MANAGER: "Manages products and reads customer feedback",
    CASHIER: "Runs the point of sale",
}

PRODUCTS = [
    ("Potato Chips", "35.00", 120),
    ("Cheese Puffs", "30.00", 80),
    ("Chocolate Bar", "45.00", 60),
    ("Peanuts", "25.00", 8),
    ("Iced Tea", "40.00", 50),
    ("Cola 330ml", "38.00", 5),
    ("Bottled Water", "20.00", 200),
    ("Cup Noodles", "28.00", 9),
]


def create_roles(db):
    roles = {}
    for name, description in ROLES.items():
        role = db.query(Role).filter(Role.role_name == name).first()
        if not role:
            role = Role(role_name=name, description=description)
            db.add(role)
            db.flush()
        roles[name] = role
    db.commit()
    return roles


def create_user(db, role, email: str, password: str, first_name: str, last_name: str):
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(
        first_name=first_name,
        last_name=last_name,
        age="30",
        gender=random.choice(list(Gender)),
        contact="09170000000",
        address="Main Street",
        email=email,
        password=hash_password(password),
        role_id=role.role_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_products(db):
    products = []
    for name, price, quantity in PRODUCTS:
        product = db.query(Product).filter(Product.product_name == name).first()
        if not product:
            product = Product(product_name=name, price=Decimal(price), quantity=quantity)
            db.add(product)
        products.append(product)
    db.commit()
    return products


def create_orders(db, cashier, products, count: int):
    service = OrderService(db)
    placed = 0
    for _ in range(count):
        in_stock = [p for p in products if p.quantity >= 2]
        if not in_stock:
            break
        lines = random.sample(in_stock, k=min(2, len(in_stock)))
        order_data = OrderCreate(
            customer_name="Walk-in",
            items=[OrderItemIn(product_id=p.product_id, quantity=random.randint(1, 2)) for p in lines],
            payment_method=random.choice(list(PaymentMethod)),
            amount_paid=Decimal("1000"),
        )
        service.place_order(order_data, cashier=cashier)
        for p in lines:
            db.refresh(p)
        placed += 1
    return placed


def main():
    parser = argparse.ArgumentParser(description="Seed SnackHub demo data")
    parser.add_argument("--email", default="admin@snackhub.com")
    parser.add_argument("--password", default="SnackHub!2025")
    parser.add_argument("--orders", type=int, default=0)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        print("Creating roles...")
        roles = create_roles(db)

        print("Creating users...")
        admin = create_user(db, roles[ADMIN], args.email, args.password, "Admin", "Demo")
        create_user(db, roles[MANAGER], "manager@snackhub.com", args.password, "Manager", "Demo")
        cashier = create_user(db, roles[CASHIER], "cashier@snackhub.com", args.password, "Cashier", "Demo")

        print("Creating products...")
        products = create_products(db)
        print(f"Products available: {len(products)}")

        if args.orders:
            print("Placing demo orders...")
            placed = create_orders(db, cashier, products, args.orders)
            print(f"Orders placed: {placed}")

        print("\nSeed completed.")
        print("Login credentials:")
        print(f"  Email:    {admin.email}")
        print(f"  Password: {args.password}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
