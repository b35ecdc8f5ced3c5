"""HTTP tests for the /api/order blueprint."""

from __future__ import annotations

import pytest


@pytest.fixture
def filled_cart(client, customer, customer_headers, catalog) -> None:
    url = f"/api/cart/user/{customer.id}/add"
    client.post(url, json={"variant_id": catalog["small"].id, "quantity": 2}, headers=customer_headers)
    client.post(url, json={"variant_id": catalog["large"].id, "quantity": 1}, headers=customer_headers)


def place_order(client, user, headers, **body):
    body.setdefault("shipping_address", "1 Farm Road, Greenfield")
    body.setdefault("payment_method", "COD")
    return client.post(f"/api/order/user/{user.id}", json=body, headers=headers)


class TestPlaceOrder:
    """Tests for checkout over HTTP."""

    def test_create_order(self, client, customer, customer_headers, filled_cart, coupon) -> None:
        response = place_order(client, customer, customer_headers, coupon_code="SAVE5")

        body = response.get_json()
        assert response.status_code == 201
        assert body["status"] == "Pending"
        assert body["total_amount"] == 15.0
        assert body["coupon_code"] == "SAVE5"
        assert len(body["details"]) == 2
        assert client.get(f"/api/cart/user/{customer.id}/count", headers=customer_headers).get_json() == {"count": 0}

    def test_empty_cart(self, client, customer, customer_headers) -> None:
        response = place_order(client, customer, customer_headers)

        assert response.status_code == 400
        assert response.get_json()["message"] == "Cart is empty"

    def test_missing_shipping_address(self, client, customer, customer_headers, filled_cart) -> None:
        response = place_order(client, customer, customer_headers, shipping_address="")

        assert response.status_code == 400
        assert response.get_json()["errors"][0]["field"] == "shipping_address"

    def test_cannot_order_for_someone_else(self, client, other_customer, customer_headers) -> None:
        assert place_order(client, other_customer, customer_headers).status_code == 403


class TestOrderLifecycle:
    """Tests for reading, cancelling and moving orders along."""

    @pytest.fixture
    def order(self, client, customer, customer_headers, filled_cart) -> dict:
        return place_order(client, customer, customer_headers).get_json()

    def test_owner_reads_order(self, client, customer_headers, order) -> None:
        response = client.get(f"/api/order/{order['id']}", headers=customer_headers)

        assert response.status_code == 200
        assert response.get_json()["total_amount"] == 20.0

    def test_stranger_cannot_read_order(self, client, other_headers, order) -> None:
        assert client.get(f"/api/order/{order['id']}", headers=other_headers).status_code == 403

    def test_missing_order(self, client, customer_headers) -> None:
        assert client.get("/api/order/999", headers=customer_headers).status_code == 404

    def test_cancel(self, client, customer_headers, order) -> None:
        url = f"/api/order/{order['id']}/cancel"

        assert client.put(url, headers=customer_headers).status_code == 204
        again = client.put(url, headers=customer_headers)
        assert again.status_code == 404
        assert "cannot be cancelled" in again.get_json()["message"]

    def test_status_update_is_admin_only(self, client, customer_headers, admin_headers, order) -> None:
        url = f"/api/order/{order['id']}/status"

        assert client.put(url, json={"status": "Shipped"}, headers=customer_headers).status_code == 403
        assert client.put(url, json={"status": "Shipped"}, headers=admin_headers).status_code == 204
        assert client.put(url, json={"status": "Lost"}, headers=admin_headers).status_code == 400

    def test_orders_by_status(self, client, admin_headers, order) -> None:
        pending = client.get("/api/order/status/Pending", headers=admin_headers)
        unknown = client.get("/api/order/status/Lost", headers=admin_headers)

        assert [o["id"] for o in pending.get_json()] == [order["id"]]
        assert unknown.status_code == 400

    def test_orders_by_user_is_paged(self, client, customer, customer_headers, order) -> None:
        body = client.get(f"/api/order/user/{customer.id}?page_size=5", headers=customer_headers).get_json()

        assert body["total_count"] == 1
        assert body["page_size"] == 5
        assert body["items"][0]["id"] == order["id"]

    def test_admin_listing_filters_by_status(self, client, admin_headers, order) -> None:
        delivered = client.get("/api/order?status=Delivered", headers=admin_headers).get_json()
        pending = client.get("/api/order?status=Pending", headers=admin_headers).get_json()

        assert delivered["total_count"] == 0
        assert pending["total_count"] == 1


class TestReporting:
    """Tests for revenue and daily statistics endpoints."""

    def test_revenue_counts_delivered_orders(self, client, customer, customer_headers, admin_headers,
                                             filled_cart) -> None:
        order = place_order(client, customer, customer_headers).get_json()
        client.put(f"/api/order/{order['id']}/status", json={"status": "Delivered"}, headers=admin_headers)

        body = client.get("/api/order/revenue", headers=admin_headers).get_json()

        assert body["revenue"] == 20.0
        assert body["from_date"] is None

    def test_bad_revenue_date(self, client, admin_headers) -> None:
        assert client.get("/api/order/revenue?from_date=yesterday", headers=admin_headers).status_code == 400

    def test_daily_statistics_defaults_to_today(self, client, customer, customer_headers, admin_headers,
                                               filled_cart) -> None:
        place_order(client, customer, customer_headers)

        body = client.get("/api/order/statistics/daily", headers=admin_headers).get_json()

        assert body["total_orders"] == 1
        assert body["pending_orders"] == 1
