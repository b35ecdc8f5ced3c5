"""HTTP tests for health, categories, products, variants, reviews and addresses."""

from __future__ import annotations


class TestHealth:
    def test_health(self, client) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}


class TestCatalogApi:
    """Tests for the public catalog and its admin maintenance."""

    def test_product_listing(self, client, catalog) -> None:
        body = client.get("/api/product?page_size=5").get_json()

        assert body["total_count"] == 1
        assert body["has_next"] is False
        assert body["items"][0]["min_price"] == 5.0
        assert body["items"][0]["max_price"] == 10.0

    def test_product_listing_filters(self, client, catalog) -> None:
        in_range = client.get("/api/product?min_price=9&max_price=20").get_json()
        out_of_range = client.get("/api/product?min_price=50").get_json()

        assert in_range["total_count"] == 1
        assert out_of_range["total_count"] == 0

    def test_negative_price_filter(self, client) -> None:
        assert client.get("/api/product?min_price=-3").status_code == 400

    def test_product_detail(self, client, catalog) -> None:
        body = client.get(f"/api/product/{catalog['product'].id}").get_json()

        assert body["category_name"] == "Tomato seeds"
        assert [v["name"] for v in body["variants"]] == ["10g pack", "50g pack", "1kg sack"]

    def test_search_and_featured(self, client, catalog) -> None:
        assert client.get("/api/product/search?term=tomato").get_json()["total_count"] == 1
        assert [p["name"] for p in client.get("/api/product/featured/3").get_json()] == ["Cherry Tomato Seeds"]

    def test_create_product_as_admin(self, client, admin_headers, catalog) -> None:
        response = client.post(
            "/api/product", json={"name": "Watering Can", "category_id": catalog["category"].id}, headers=admin_headers
        )

        assert response.status_code == 201
        assert response.get_json()["category_name"] == "Seeds"

    def test_create_product_as_customer(self, client, customer_headers) -> None:
        response = client.post("/api/product", json={"name": "Watering Can"}, headers=customer_headers)

        assert response.status_code == 403

    def test_category_tree(self, client, catalog) -> None:
        roots = client.get("/api/category/roots").get_json()
        subs = client.get(f"/api/category/{catalog['category'].id}/subcategories").get_json()

        assert [c["name"] for c in roots] == ["Seeds"]
        assert [c["name"] for c in subs] == ["Tomato seeds"]

    def test_delete_category_with_products(self, client, admin_headers, catalog) -> None:
        response = client.delete(f"/api/category/{catalog['subcategory'].id}", headers=admin_headers)

        assert response.status_code == 400

    def test_low_stock_uses_configured_threshold(self, client, catalog) -> None:
        ids = [v["id"] for v in client.get("/api/product-variants/low-stock").get_json()]

        assert ids == [catalog["large"].id]

    def test_update_stock(self, client, admin_headers, catalog) -> None:
        url = f"/api/product-variants/update-stock/{catalog['large'].id}"

        assert client.put(url, json={"quantity": 2}, headers=admin_headers).status_code == 204
        overdraw = client.put(url, json={"quantity": 2}, headers=admin_headers)
        assert overdraw.status_code == 400
        assert overdraw.get_json()["message"] == "Insufficient stock"
        assert client.put("/api/product-variants/update-stock/999", json={"quantity": 1},
                          headers=admin_headers).status_code == 404


class TestReviewApi:
    """Tests for review endpoints."""

    def test_review_flow(self, client, customer, customer_headers, catalog) -> None:
        product_id = catalog["product"].id

        before = client.get(f"/api/review/can-review/{customer.id}/{product_id}", headers=customer_headers)
        created = client.post(f"/api/review/create/{customer.id}", json={"product_id": product_id, "rating": 4},
                              headers=customer_headers)
        average = client.get(f"/api/review/product/{product_id}/average-rating")

        assert before.get_json() == {"can_review": True}
        assert created.status_code == 201
        assert average.get_json() == {"product_id": product_id, "average_rating": 4.0}

    def test_only_author_edits(self, client, customer, customer_headers, other_headers, catalog) -> None:
        review = client.post(
            f"/api/review/create/{customer.id}", json={"product_id": catalog["product"].id, "rating": 2},
            headers=customer_headers,
        ).get_json()

        response = client.put(f"/api/review/update/{review['id']}", json={"rating": 5}, headers=other_headers)

        assert response.status_code == 403


class TestAddressApi:
    """Tests for address endpoints."""

    def test_address_flow(self, client, customer, customer_headers) -> None:
        base = f"/api/address/user/{customer.id}"

        first = client.post(base, json={"address_line": "1 Farm Road, Greenfield", "is_default": True},
                            headers=customer_headers).get_json()
        second = client.post(base, json={"address_line": "2 Barn Street, Greenfield"},
                             headers=customer_headers).get_json()
        switched = client.put(f"{base}/default/{second['id']}", headers=customer_headers)
        default = client.get(f"{base}/default", headers=customer_headers).get_json()

        assert first["is_default"] is True
        assert switched.status_code == 204
        assert default["id"] == second["id"]

    def test_stranger_cannot_delete(self, client, customer, customer_headers, other_headers) -> None:
        address = client.post(f"/api/address/user/{customer.id}", json={"address_line": "1 Farm Road, Greenfield"},
                              headers=customer_headers).get_json()

        assert client.delete(f"/api/address/{address['id']}", headers=other_headers).status_code == 403
