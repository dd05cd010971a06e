"""
Component tests for the HTTP surface.

Requests go through the real routers, services and an in-memory storage;
only the remote feed download is replaced.
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from storefront.api.routers.products import get_feed_client
from storefront.domain.errors import StorageUnavailable

CSV = (
    "name,description,category,price\n"
    "Mouse,Wireless,Peripherals,49.5\n"
    "Keyboard,Mechanical,Peripherals,199.99\n"
)


def create_product(client: TestClient, name="Cable", price=10.0):
    response = client.post(
        "/products",
        json={"name": name, "description": "", "category": "Accessories", "price": price},
    )
    assert response.status_code == 201
    return response.json()


class TestRegistration:
    def test_register_returns_201_and_user(self, test_client):
        response = test_client.post(
            "/register",
            json={"email": "alice@example.com", "name": "Alice", "password": "Abcdef1!"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "alice@example.com"
        assert body["name"] == "Alice"
        assert "password" not in body

    def test_invalid_email_is_422_with_message(self, test_client):
        response = test_client.post(
            "/register",
            json={"email": "alice.example.com", "name": "Alice", "password": "Abcdef1!"},
        )

        assert response.status_code == 422
        assert "Email" in response.json()["detail"]

    def test_missing_field_is_422(self, test_client):
        response = test_client.post("/register", json={"email": "alice@example.com"})

        assert response.status_code == 422

    def test_users_me(self, test_client, auth_headers):
        response = test_client.get("/users/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == auth_headers["x-user-id"]


class TestProducts:
    def test_list_starts_empty(self, test_client):
        response = test_client.get("/products")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_and_get(self, test_client):
        created = create_product(test_client, "Mouse", 49.5)

        response = test_client.get(f"/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_is_404(self, test_client):
        response = test_client.get("/products/does-not-exist")

        assert response.status_code == 404
        assert "detail" in response.json()

    def test_create_without_price_is_422(self, test_client):
        response = test_client.post("/products", json={"name": "Mouse"})

        assert response.status_code == 422

    def test_update_and_delete(self, test_client):
        created = create_product(test_client, "Mouse", 49.5)

        updated = test_client.put(f"/products/{created['id']}", json={"price": 39.0})
        assert updated.status_code == 200
        assert updated.json()["price"] == 39.0
        assert updated.json()["name"] == "Mouse"

        deleted = test_client.delete(f"/products/{created['id']}")
        assert deleted.status_code == 204
        assert test_client.get(f"/products/{created['id']}").status_code == 404
        assert test_client.delete(f"/products/{created['id']}").status_code == 404


class TestProductImport:
    def test_upload_csv_appends_products(self, test_client):
        existing = create_product(test_client, "Monitor", 899.0)

        response = test_client.post(
            "/products/import",
            files={"file": ("products.csv", CSV.encode("utf-8"), "text/csv")},
        )

        assert response.status_code == 201
        imported = response.json()
        assert [p["name"] for p in imported] == ["Mouse", "Keyboard"]
        assert existing["id"] not in [p["id"] for p in imported]
        assert len(test_client.get("/products").json()) == 3

    def test_upload_skips_non_finite_and_negative_prices(self, test_client):
        feed = CSV + "Ghost,,,nan\nVoid,,,inf\nRefund,,,-5\n"

        response = test_client.post(
            "/products/import",
            files={"file": ("products.csv", feed.encode("utf-8"), "text/csv")},
        )

        assert response.status_code == 201
        assert [p["name"] for p in response.json()] == ["Mouse", "Keyboard"]
        listed = test_client.get("/products")
        assert listed.status_code == 200
        assert len(listed.json()) == 2

    def test_feed_without_price_column_is_500(self, test_client):
        response = test_client.post(
            "/products/import",
            files={"file": ("bad.csv", b"name,description\nMouse,Wireless\n", "text/csv")},
        )

        assert response.status_code == 500
        assert "price" in response.json()["detail"]
        assert test_client.get("/products").json() == []

    def test_import_from_url(self, test_client):
        feed = MagicMock()
        feed.fetch_csv.return_value = CSV
        test_client.app.dependency_overrides[get_feed_client] = lambda: feed
        try:
            response = test_client.post("/products/import", params={"source_url": "http://feeds.local/p.csv"})
        finally:
            test_client.app.dependency_overrides.clear()

        assert response.status_code == 201
        assert len(response.json()) == 2
        feed.fetch_csv.assert_called_once_with("http://feeds.local/p.csv")

    def test_import_needs_a_source(self, test_client):
        response = test_client.post("/products/import")

        assert response.status_code == 422


class TestCartAuth:
    @pytest.mark.parametrize("method", ["put", "delete"])
    def test_missing_token_is_401(self, test_client, method):
        product = create_product(test_client)

        response = getattr(test_client, method)(f"/cart/{product['id']}")

        assert response.status_code == 401

    def test_unknown_token_is_401(self, test_client):
        response = test_client.post("/cart/checkout", headers={"x-user-id": "intruder"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid x-user-id"


class TestCartFlow:
    def test_add_remove_checkout(self, test_client, auth_headers):
        """
        Full purchase: two products in, one removed, one re-added, checkout,
        then the cart is empty and a second checkout is refused.
        """
        # Arrange
        cable = create_product(test_client, "Cable", 10.0)
        adapter = create_product(test_client, "Adapter", 5.5)

        # Act & Assert: add
        added = test_client.put(f"/cart/{cable['id']}", headers=auth_headers)
        assert added.status_code == 200
        added = test_client.put(f"/cart/{adapter['id']}", headers=auth_headers)
        assert [p["id"] for p in added.json()["products"]] == [cable["id"], adapter["id"]]

        # remove and a no-op remove
        removed = test_client.delete(f"/cart/{adapter['id']}", headers=auth_headers)
        assert removed.status_code == 200
        assert [p["id"] for p in removed.json()["products"]] == [cable["id"]]
        noop = test_client.delete(f"/cart/{adapter['id']}", headers=auth_headers)
        assert noop.json() == removed.json()

        test_client.put(f"/cart/{adapter['id']}", headers=auth_headers)

        # checkout
        checkout = test_client.post("/cart/checkout", headers=auth_headers)
        assert checkout.status_code == 201
        order = checkout.json()
        assert order["total_price"] == 15.5
        assert len(order["products"]) == 2

        cart = test_client.get("/cart", headers=auth_headers)
        assert cart.json()["products"] == []
        assert cart.json()["id"] == added.json()["id"]

        again = test_client.post("/cart/checkout", headers=auth_headers)
        assert again.status_code == 400

        # orders
        orders = test_client.get("/orders", headers=auth_headers).json()
        assert [o["id"] for o in orders] == [order["id"]]
        assert test_client.get(f"/orders/{order['id']}", headers=auth_headers).json()["total_price"] == 15.5

    def test_add_unknown_product_is_404(self, test_client, auth_headers):
        response = test_client.put("/cart/nope", headers=auth_headers)

        assert response.status_code == 404

    def test_remove_without_cart_is_404(self, test_client, auth_headers):
        product = create_product(test_client)

        response = test_client.delete(f"/cart/{product['id']}", headers=auth_headers)

        assert response.status_code == 404

    def test_checkout_empty_cart_is_400(self, test_client, auth_headers):
        response = test_client.post("/cart/checkout", headers=auth_headers)

        assert response.status_code == 400
        assert test_client.get("/orders", headers=auth_headers).json() == []

    def test_unknown_order_is_404(self, test_client, auth_headers):
        response = test_client.get("/orders/nope", headers=auth_headers)

        assert response.status_code == 404


class TestErrorBoundary:
    def test_storage_failure_is_generic_500(self, test_client, storage):
        with patch.object(storage, "find_all", side_effect=StorageUnavailable("db password wrong")):
            response = test_client.get("/products")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

    def test_health(self, test_client):
        assert test_client.get("/health").json() == {"status": "ok"}


class TestSeed:
    def test_sample_products_are_seeded_on_startup(self, storage, lock_service, ids):
        from storefront.main import create_app

        app = create_app(storage=storage, lock_service=lock_service, ids=ids, seed_products=True)
        with TestClient(app) as client:
            names = sorted(p["name"] for p in client.get("/products").json())

        assert names == ["Keyboard", "Monitor", "Mouse"]
