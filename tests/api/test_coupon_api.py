"""HTTP tests for the /api/coupon blueprint."""

from __future__ import annotations

from datetime import timedelta

from agristore.models.entities import utcnow


def coupon_body(code: str = "HARVEST", **overrides) -> dict:
    now = utcnow()
    body = {
        "code": code,
        "discount_value": 7.5,
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=7)).isoformat(),
    }
    body.update(overrides)
    return body


class TestCouponChecks:
    """Tests for the public validate and calculate-discount endpoints."""

    def test_validate_active_coupon(self, client, coupon) -> None:
        response = client.post("/api/coupon/validate", json={"code": "SAVE5"})

        assert response.get_json() == {"is_valid": True, "message": "Coupon is valid"}

    def test_validate_expired_coupon(self, client, expired_coupon) -> None:
        body = client.post("/api/coupon/validate", json={"code": "OLD10"}).get_json()

        assert body["is_valid"] is False
        assert body["message"] == "Coupon is invalid or expired"

    def test_validate_requires_code(self, client) -> None:
        response = client.post("/api/coupon/validate", json={})

        assert response.status_code == 400
        assert response.get_json()["errors"][0]["field"] == "code"

    def test_calculate_discount(self, client, coupon) -> None:
        response = client.post("/api/coupon/calculate-discount", json={"code": "SAVE5", "order_amount": 42})

        assert response.get_json() == {"discount": 5.0, "final_amount": 37.0}

    def test_calculate_discount_for_unknown_code(self, client) -> None:
        response = client.post("/api/coupon/calculate-discount", json={"code": "NOPE", "order_amount": "12.50"})

        assert response.get_json() == {"discount": 0.0, "final_amount": 12.5}


class TestCouponAdmin:
    """Tests for coupon maintenance."""

    def test_create_and_fetch_by_code(self, client, admin_headers) -> None:
        created = client.post("/api/coupon", json=coupon_body(), headers=admin_headers)
        fetched = client.get("/api/coupon/code/HARVEST")

        assert created.status_code == 201
        assert fetched.get_json()["id"] == created.get_json()["id"]
        assert fetched.get_json()["discount_value"] == 7.5

    def test_duplicate_code(self, client, admin_headers, coupon) -> None:
        response = client.post("/api/coupon", json=coupon_body("SAVE5"), headers=admin_headers)

        assert response.status_code == 409

    def test_customer_cannot_create(self, client, customer_headers) -> None:
        assert client.post("/api/coupon", json=coupon_body(), headers=customer_headers).status_code == 403

    def test_active_listing_skips_expired(self, client, coupon, expired_coupon) -> None:
        codes = [c["code"] for c in client.get("/api/coupon/active").get_json()]

        assert codes == ["SAVE5"]

    def test_update_and_delete(self, client, admin_headers, coupon) -> None:
        url = f"/api/coupon/{coupon.id}"

        updated = client.put(url, json={"discount_value": "6.00"}, headers=admin_headers)
        deleted = client.delete(url, headers=admin_headers)

        assert updated.get_json()["discount_value"] == 6.0
        assert deleted.status_code == 204
        assert client.get(url).get_json()["is_active"] is False
        assert client.post("/api/coupon/validate", json={"code": "SAVE5"}).get_json()["is_valid"] is False
