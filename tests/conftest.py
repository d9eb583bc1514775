"""
Pytest configuration and fixtures for the POS back end.
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.core.models import User
from apps.inventory.models import Category, Product


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    return APIClient()


def _client_for(user):
    client = APIClient()
    token = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.access_token}")
    return client


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="admin",
        password="AdminPass!2024",
        email="admin@example.com",
        full_name="Store Admin",
        role=User.ADMIN,
    )


@pytest.fixture
def manager_user(db):
    return User.objects.create_user(
        username="manager",
        password="ManagerPass!2024",
        email="manager@example.com",
        full_name="Store Manager",
        role=User.MANAGER,
    )


@pytest.fixture
def cashier_user(db):
    return User.objects.create_user(
        username="cashier",
        password="CashierPass!2024",
        email="cashier@example.com",
        full_name="Front Cashier",
        role=User.CASHIER,
    )


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated with a JWT for an administrator."""
    return _client_for(admin_user)


@pytest.fixture
def manager_client(manager_user):
    return _client_for(manager_user)


@pytest.fixture
def cashier_client(cashier_user):
    return _client_for(cashier_user)


@pytest.fixture
def category(db):
    return Category.objects.create(name="Beverages", description="Drinks and juices")


@pytest.fixture
def product(category):
    """Product with stock 10 priced at 5.00."""
    return Product.objects.create(
        sku="BEV-001",
        name="Iced Tea",
        category=category,
        price=Decimal("5.00"),
        cost=Decimal("3.00"),
        stock=10,
    )


@pytest.fixture
def make_product(category):
    """Factory for products in the default category."""
    counter = {"n": 0}

    def _make(name=None, price="1.00", stock=0, **kwargs):
        counter["n"] += 1
        return Product.objects.create(
            sku=kwargs.pop("sku", f"TST-{counter['n']:03d}"),
            name=name or f"Test Product {counter['n']}",
            category=kwargs.pop("category", category),
            price=Decimal(price),
            stock=stock,
            **kwargs,
        )

    return _make
