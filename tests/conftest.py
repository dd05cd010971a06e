"""
Shared fixtures: in-memory storage with deterministic ids, services wired to
it, and a TestClient around the full application.
"""
import os

# settings are read at import time
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOCK_BACKEND", "local")
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.setdefault("SEED_SAMPLE_PRODUCTS", "false")

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from storefront.main import create_app
from storefront.repos import MemoryStorage
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.lock_service import LocalLockService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService
from storefront.utils.ids import SequentialIds

VALID_PASSWORD = "Abcdef1!"


@pytest.fixture
def ids():
    return SequentialIds("id")


@pytest.fixture
def storage(ids):
    return MemoryStorage(ids=ids)


@pytest.fixture
def lock_service():
    return LocalLockService(timeout=5)


@pytest.fixture
def catalog(storage, ids):
    return CatalogService(storage, ids=ids)


@pytest.fixture
def users(storage, ids):
    return UserService(storage, ids=ids, enforce_name_length=True)


@pytest.fixture
def carts(storage, lock_service, ids):
    return CartService(storage, lock_service, ids=ids)


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def orders(storage, lock_service, ids, notifier):
    return OrderService(storage, lock_service, ids=ids, notification_service=notifier)


@pytest.fixture
def user(users):
    return users.register("alice@example.com", "Alice", VALID_PASSWORD)


@pytest.fixture
def test_client(storage, lock_service, ids):
    app = create_app(storage=storage, lock_service=lock_service, ids=ids, seed_products=False)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(test_client):
    response = test_client.post(
        "/register",
        json={"email": "bob@example.com", "name": "Bob Smith", "password": VALID_PASSWORD},
    )
    assert response.status_code == 201
    return {"x-user-id": response.json()["id"]}
