"""Every failure leaves the API in the same JSON envelope."""

from __future__ import annotations

from datetime import datetime

import pytest

from agristore.services.products import ProductService

ENVELOPE_KEYS = {"success", "message", "statusCode", "timestamp"}


def assert_envelope(response, status_code: int) -> dict:
    body = response.get_json()
    assert response.status_code == status_code
    assert ENVELOPE_KEYS <= set(body)
    assert body["success"] is False
    assert body["statusCode"] == status_code
    datetime.fromisoformat(body["timestamp"])
    return body


class TestErrorEnvelope:
    """Tests for the shape of error responses."""

    def test_validation_errors_list_fields(self, client, customer, customer_headers) -> None:
        response = client.post(
            f"/api/cart/user/{customer.id}/add", json={"variant_id": "x", "quantity": 0}, headers=customer_headers
        )

        body = assert_envelope(response, 400)
        assert {e["field"] for e in body["errors"]} == {"variant_id", "quantity"}
        assert body["message"] == "One or more validation errors occurred"

    def test_not_found_has_no_error_list(self, client) -> None:
        body = assert_envelope(client.get("/api/product/12345"), 404)

        assert "errors" not in body
        assert body["message"] == "Product with ID 12345 not found"

    def test_duplicate_is_conflict(self, client, customer) -> None:
        response = client.post("/api/user", json={
            "full_name": "Another Farmer",
            "username": "farmer",
            "password": "tractor",
        })

        assert assert_envelope(response, 409)["message"] == "Username already exists"

    def test_unauthenticated(self, client) -> None:
        assert_envelope(client.get("/api/order"), 401)

    def test_forbidden(self, client, customer_headers) -> None:
        assert_envelope(client.get("/api/coupon", headers=customer_headers), 403)

    @pytest.mark.parametrize("payload", ["[1, 2]", "not json"])
    def test_body_must_be_an_object(self, client, payload) -> None:
        response = client.post("/api/coupon/validate", data=payload, content_type="application/json")

        assert assert_envelope(response, 400)["message"] == "Request body must be a JSON object"

    def test_unknown_route(self, client) -> None:
        assert_envelope(client.get("/api/tractors"), 404)

    def test_wrong_method(self, client) -> None:
        assert_envelope(client.delete("/api/health"), 405)

    def test_unexpected_error_is_hidden(self, app, client, monkeypatch) -> None:
        def explode(self, count):
            raise RuntimeError("database on fire")

        monkeypatch.setattr(ProductService, "get_featured_products", explode)

        body = assert_envelope(client.get("/api/product/featured"), 500)
        assert body["message"] == "An unexpected error occurred"
