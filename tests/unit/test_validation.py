"""Unit tests for request parsing, validation and pagination."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from agristore.models.dtos import (
    AddToCartRequest,
    CreateCouponRequest,
    CreateUserRequest,
    PagedResult,
    PaginationParams,
    ProductFilterParams,
    UpdateCouponRequest,
    UpdateOrderStatusRequest,
)
from agristore.models.validation import (
    ensure_valid,
    validate_add_to_cart,
    validate_create_coupon,
    validate_create_user,
    validate_order_status,
    validate_product_filter,
    validate_update_coupon,
)
from agristore.utils.exceptions import ValidationError


def fields_of(errors) -> set[str]:
    return {e.field for e in errors}


class TestFromDict:
    """Tests for building request objects from JSON bodies."""

    def test_values_are_parsed_on_validation(self) -> None:
        dto = AddToCartRequest.from_dict({"variant_id": "3", "quantity": 2})

        assert dto.variant_id == "3"
        assert validate_add_to_cart(dto) == []
        assert dto.variant_id == 3
        assert dto.quantity == 2
        assert dto.provided == frozenset({"variant_id", "quantity"})

    def test_unknown_keys_are_ignored(self) -> None:
        dto = AddToCartRequest.from_dict({"variant_id": 1, "quantity": 1, "price": "0.01"})

        assert not hasattr(dto, "price")

    def test_coupon_dates_are_parsed(self) -> None:
        dto = CreateCouponRequest.from_dict({
            "code": "SUMMER",
            "discount_value": "12.5",
            "start_date": "2025-06-01T00:00:00Z",
            "end_date": "2025-06-30T23:59:59",
        })

        assert validate_create_coupon(dto) == []
        assert dto.discount_value == Decimal("12.5")
        assert dto.start_date == datetime(2025, 6, 1)
        assert dto.end_date == datetime(2025, 6, 30, 23, 59, 59)
        assert dto.is_active is True

    def test_garbage_stays_for_the_validator(self) -> None:
        dto = AddToCartRequest.from_dict({"variant_id": "abc", "quantity": True})

        assert fields_of(validate_add_to_cart(dto)) == {"variant_id", "quantity"}


class TestRules:
    """Tests for individual validation rules."""

    def test_missing_required_fields(self) -> None:
        errors = validate_create_user(CreateUserRequest())

        assert fields_of(errors) == {"full_name", "username", "password"}

    @pytest.mark.parametrize(
        "email", ["not-an-email", "two..dots@farm.com", "grower@farm..com", "grower@-farm.com", "ann@acre"]
    )
    def test_bad_email(self, email) -> None:
        dto = CreateUserRequest(full_name="Ann Acre", username="ann", password="secret1", email=email)

        assert fields_of(validate_create_user(dto)) == {"email"}

    def test_good_email_is_stripped(self) -> None:
        dto = CreateUserRequest(full_name="Ann Acre", username="ann", password="secret1", email=" ann@acre-farm.com ")

        assert validate_create_user(dto) == []
        assert dto.email == "ann@acre-farm.com"

    def test_invalid_values_are_not_written_back(self) -> None:
        dto = AddToCartRequest(variant_id="abc", quantity="2")

        assert fields_of(validate_add_to_cart(dto)) == {"variant_id"}
        assert dto.variant_id == "abc"
        assert dto.quantity == "2"

    def test_coupon_end_before_start(self) -> None:
        dto = UpdateCouponRequest(start_date=datetime(2025, 2, 1), end_date=datetime(2025, 1, 1))

        assert fields_of(validate_update_coupon(dto)) == {"end_date"}

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "ten"])
    def test_discount_must_be_a_finite_number(self, value) -> None:
        dto = UpdateCouponRequest(discount_value=value)

        assert fields_of(validate_update_coupon(dto)) == {"discount_value"}

    def test_unknown_order_status(self) -> None:
        assert fields_of(validate_order_status(UpdateOrderStatusRequest(status="Lost"))) == {"status"}

    def test_coupon_discount_bounds(self) -> None:
        dto = CreateCouponRequest(
            code="TOO-MUCH",
            discount_value=Decimal("100000.01"),
            start_date=datetime(2025, 1, 1),
            end_date=datetime(2025, 2, 1),
        )

        assert fields_of(validate_create_coupon(dto)) == {"discount_value"}

    def test_negative_price_filter(self) -> None:
        params = ProductFilterParams(min_price=Decimal("-1"))

        assert fields_of(validate_product_filter(params)) == {"min_price"}

    def test_ensure_valid_raises_with_field_list(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(validate_add_to_cart(AddToCartRequest()))

        assert exc_info.value.status_code == 400
        assert {e["field"] for e in exc_info.value.payload["errors"]} == {"variant_id", "quantity"}


class TestPagination:
    """Tests for paging parameters and results."""

    @pytest.mark.parametrize(
        ("page_number", "page_size", "expected"),
        [
            (0, 10, (1, 10)),
            (-4, 10, (1, 10)),
            (2, 0, (2, 1)),
            (1, 500, (1, 50)),
            ("3", "20", (3, 20)),
            ("x", "y", (1, 10)),
        ],
    )
    def test_params_are_clamped(self, page_number, page_size, expected) -> None:
        params = PaginationParams(page_number, page_size)

        assert (params.page_number, params.page_size) == expected

    def test_from_query_defaults(self) -> None:
        params = PaginationParams.from_query({})

        assert (params.page_number, params.page_size) == (1, 10)

    def test_result_navigation(self) -> None:
        result = PagedResult(items=[], total_count=21, page_number=2, page_size=10)

        assert result.total_pages == 3
        assert result.has_previous is True
        assert result.has_next is True

    def test_last_page(self) -> None:
        result = PagedResult(items=[], total_count=20, page_number=2, page_size=10)

        assert result.total_pages == 2
        assert result.has_next is False

    def test_empty_result(self) -> None:
        result = PagedResult(items=[], total_count=0, page_number=1, page_size=10)

        assert result.total_pages == 0
        assert result.has_previous is False
        assert result.has_next is False
