"""Unit tests for ReviewService."""

from __future__ import annotations

import pytest

from agristore.models.dtos import CreateReviewRequest, PaginationParams, ReviewFilterParams, UpdateReviewRequest
from agristore.utils.exceptions import BadRequestError, NotFoundError, ValidationError


class TestReviews:
    """Tests for creating, listing and summarizing reviews."""

    def test_create_review(self, services, customer, catalog) -> None:
        product_id = catalog["product"].id
        review = services.reviews.create_review(
            customer.id, CreateReviewRequest(product_id=product_id, rating=4, comment="Sprouted fast")
        )

        assert review.rating == 4
        assert review.username == "farmer"
        assert review.product_name == "Cherry Tomato Seeds"
        assert services.reviews.can_user_review(customer.id, product_id) is False

    def test_second_review_is_rejected(self, services, customer, catalog) -> None:
        dto = CreateReviewRequest(product_id=catalog["product"].id, rating=5)
        services.reviews.create_review(customer.id, dto)

        with pytest.raises(BadRequestError, match="You have already reviewed this product"):
            services.reviews.create_review(customer.id, dto)

    def test_review_of_missing_product(self, services, customer) -> None:
        with pytest.raises(NotFoundError):
            services.reviews.create_review(customer.id, CreateReviewRequest(product_id=999, rating=3))

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, services, customer, catalog, rating) -> None:
        with pytest.raises(ValidationError):
            services.reviews.create_review(
                customer.id, CreateReviewRequest(product_id=catalog["product"].id, rating=rating)
            )

    def test_average_and_summary(self, services, customer, other_customer, catalog) -> None:
        product_id = catalog["product"].id
        services.reviews.create_review(customer.id, CreateReviewRequest(product_id=product_id, rating=5))
        services.reviews.create_review(other_customer.id, CreateReviewRequest(product_id=product_id, rating=2))

        summary = services.reviews.get_product_review_summary(product_id)

        assert services.reviews.get_average_rating(product_id) == 3.5
        assert summary.total_reviews == 2
        assert summary.rating_counts == {5: 1, 4: 0, 3: 0, 2: 1, 1: 0}

    def test_average_without_reviews_is_zero(self, services, catalog) -> None:
        assert services.reviews.get_average_rating(catalog["product"].id) == 0.0

    def test_filter_by_rating(self, services, customer, other_customer, catalog) -> None:
        product_id = catalog["product"].id
        services.reviews.create_review(customer.id, CreateReviewRequest(product_id=product_id, rating=5))
        services.reviews.create_review(other_customer.id, CreateReviewRequest(product_id=product_id, rating=2))

        page = services.reviews.get_reviews(ReviewFilterParams(min_rating=4))

        assert page.total_count == 1
        assert page.items[0].rating == 5

    def test_reviews_by_product(self, services, customer, catalog) -> None:
        product_id = catalog["product"].id
        services.reviews.create_review(customer.id, CreateReviewRequest(product_id=product_id, rating=5))

        page = services.reviews.get_reviews_by_product(product_id, PaginationParams())

        assert page.total_count == 1
        assert page.items[0].user_id == customer.id

    def test_update_and_delete(self, services, customer, catalog) -> None:
        review = services.reviews.create_review(
            customer.id, CreateReviewRequest(product_id=catalog["product"].id, rating=1)
        )

        assert services.reviews.update_review(review.id, UpdateReviewRequest(rating=3, comment="Better later"))
        assert services.reviews.get_review(review.id).comment == "Better later"

        assert services.reviews.delete_review(review.id)
        assert services.reviews.get_review(review.id) is None
        assert services.reviews.can_user_review(customer.id, catalog["product"].id) is True
