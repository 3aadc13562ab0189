"""Integration tests for the cart endpoints.

Covers:
- GET/POST/DELETE /api/v1/cart/
- PUT/PATCH/DELETE /api/v1/cart/{id}/
- POST /api/v1/cart/sync/
- Role enforcement (customers only) and per-customer isolation.
"""

from __future__ import annotations

import pytest

from modules.carts.models import CartItem

pytestmark = pytest.mark.integration

CART_URL = "/api/v1/cart/"


def _item_url(item_id) -> str:
    return f"{CART_URL}{item_id}/"


class TestCartCollection:
    def test_list_returns_own_items_only(self, customer_client, cart_items, other_customer):
        CartItem.objects.create(customer=other_customer, product_ref="polo")

        response = customer_client.get(CART_URL)

        assert response.status_code == 200
        assert {row["id"] for row in response.json()} == {
            str(item.id) for item in cart_items
        }

    def test_add_returns_201_then_200_on_merge(self, customer_client):
        payload = {"product_ref": "cap-classic", "quantity": 2}

        created = customer_client.post(CART_URL, payload, format="json")
        merged = customer_client.post(CART_URL, payload, format="json")

        assert created.status_code == 201
        assert merged.status_code == 200
        assert merged.json()["id"] == created.json()["id"]
        assert merged.json()["quantity"] == 4

    def test_add_with_quantity_out_of_range(self, customer_client):
        response = customer_client.post(
            CART_URL, {"product_ref": "cap", "quantity": 1000}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_merge_over_ceiling_is_rejected(self, customer_client):
        customer_client.post(CART_URL, {"product_ref": "cap", "quantity": 999}, format="json")

        response = customer_client.post(
            CART_URL, {"product_ref": "cap", "quantity": 1}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_quantity"

    def test_clear(self, customer_client, cart_items):
        response = customer_client.delete(CART_URL)

        assert response.status_code == 200
        assert response.json() == {"deleted_count": 2}
        assert CartItem.objects.count() == 0


class TestCartItem:
    def test_update_quantity(self, customer_client, cart_items):
        response = customer_client.patch(
            _item_url(cart_items[0].id), {"quantity": 5}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["quantity"] == 5

    def test_foreign_item_is_not_found(self, other_client, cart_items):
        response = other_client.patch(
            _item_url(cart_items[0].id), {"quantity": 5}, format="json"
        )
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "not_found"

    def test_remove(self, customer_client, cart_items):
        response = customer_client.delete(_item_url(cart_items[0].id))

        assert response.status_code == 204
        assert not CartItem.objects.filter(id=cart_items[0].id).exists()


class TestCartSync:
    def test_sync_replaces_cart(self, customer_client, cart_items):
        response = customer_client.post(
            f"{CART_URL}sync/",
            {"items": [{"product_ref": "tote", "quantity": 3}, {"quantity": 2}]},
            format="json",
        )

        assert response.status_code == 200
        assert [row["product_ref"] for row in response.json()] == ["tote"]
        assert CartItem.objects.count() == 1

    def test_empty_sync_is_a_no_op(self, customer_client, cart_items):
        response = customer_client.post(
            f"{CART_URL}sync/", {"items": []}, format="json"
        )

        assert response.status_code == 200
        assert CartItem.objects.count() == 2

    def test_sync_without_items_list(self, customer_client):
        response = customer_client.post(
            f"{CART_URL}sync/", {"items": "nope"}, format="json"
        )
        assert response.status_code == 400


class TestCartAccess:
    def test_anonymous_is_unauthorized(self, api_client):
        response = api_client.get(CART_URL)
        assert response.status_code == 401
        assert response.json()["errors"][0]["code"] == "not_authenticated"

    def test_admin_is_forbidden(self, admin_client):
        response = admin_client.get(CART_URL)
        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "permission_denied"
