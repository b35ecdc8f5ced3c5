"""Shared pytest fixtures for agristore tests.

Every test gets a fresh application backed by its own SQLite file, so tests
never share rows.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Any

import pytest

from agristore import create_app
from agristore.database.defaults import ADMIN_ROLE, CUSTOMER_ROLE, hash_password
from agristore.models.entities import Category, Coupon, Product, ProductVariant, User, utcnow
from agristore.repositories import UnitOfWork
from agristore.services import Services
from agristore.utils.auth import issue_token

CUSTOMER_PASSWORD = "customer-password"


@pytest.fixture
def app(tmp_path):
    """Application wired to a throwaway SQLite database."""
    return create_app("testing", {"DATABASE_URI": f"sqlite:///{tmp_path / 'agristore.db'}"})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def uow(app):
    with UnitOfWork(app.extensions["db"]) as unit:
        yield unit


@pytest.fixture
def services(uow) -> Services:
    return Services(uow)


def _make_user(uow: UnitOfWork, username: str, role: str = CUSTOMER_ROLE, email: str | None = None) -> User:
    role_row = uow.roles.get_by_name(role)
    return uow.users.add(User(
        full_name=f"{username.title()} Example",
        username=username,
        password_hash=hash_password(CUSTOMER_PASSWORD),
        email=email or f"{username}@example.com",
        role_id=role_row.id,
    ))


@pytest.fixture
def customer(uow) -> User:
    return _make_user(uow, "farmer")


@pytest.fixture
def other_customer(uow) -> User:
    return _make_user(uow, "grower")


@pytest.fixture
def admin(uow) -> User:
    return uow.users.get_by_username("admin")


@pytest.fixture
def catalog(uow) -> dict[str, Any]:
    """One category with one product carrying two priced variants and an inactive one."""
    seeds = uow.categories.add(Category(name="Seeds"))
    tomatoes = uow.categories.add(Category(name="Tomato seeds", parent_id=seeds.id))
    product = uow.products.add(Product(
        name="Cherry Tomato Seeds",
        category_id=tomatoes.id,
        description="Fast growing cherry tomato",
        image_url="https://cdn.example.com/tomato.png",
        supplier_name="GreenGrow",
    ))
    small = uow.variants.add(ProductVariant(
        product_id=product.id, name="10g pack", price=Decimal("5.00"), stock_quantity=100
    ))
    large = uow.variants.add(ProductVariant(
        product_id=product.id, name="50g pack", price=Decimal("10.00"), stock_quantity=3
    ))
    retired = uow.variants.add(ProductVariant(
        product_id=product.id, name="1kg sack", price=Decimal("99.00"), stock_quantity=0, is_active=False
    ))
    return {
        "category": seeds,
        "subcategory": tomatoes,
        "product": product,
        "small": small,
        "large": large,
        "retired": retired,
    }


@pytest.fixture
def coupon(uow) -> Coupon:
    now = utcnow()
    return uow.coupons.add(Coupon(
        code="SAVE5",
        discount_value=Decimal("5.00"),
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=1),
    ))


@pytest.fixture
def expired_coupon(uow) -> Coupon:
    now = utcnow()
    return uow.coupons.add(Coupon(
        code="OLD10",
        discount_value=Decimal("10.00"),
        start_date=now - timedelta(days=30),
        end_date=now - timedelta(days=1),
    ))


def bearer(app, user: User, role: str) -> dict[str, str]:
    with app.app_context():
        token = issue_token(user.id, user.username, role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(app, customer) -> dict[str, str]:
    return bearer(app, customer, CUSTOMER_ROLE)


@pytest.fixture
def other_headers(app, other_customer) -> dict[str, str]:
    return bearer(app, other_customer, CUSTOMER_ROLE)


@pytest.fixture
def admin_headers(app, admin) -> dict[str, str]:
    return bearer(app, admin, ADMIN_ROLE)


@pytest.fixture
def customer_password() -> str:
    return CUSTOMER_PASSWORD
