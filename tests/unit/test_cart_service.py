"""Unit tests for CartService."""

from __future__ import annotations

from decimal import Decimal

import pytest

from agristore.models.dtos import AddToCartRequest, UpdateCartItemRequest
from agristore.utils.exceptions import NotFoundError, ValidationError


class TestAddToCart:
    """Tests for adding variants to a cart."""

    def test_new_line_is_created(self, services, customer, catalog) -> None:
        item = services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["small"].id, quantity=2))

        assert item.quantity == 2
        assert item.price == Decimal("5.00")
        assert item.total_price == Decimal("10.00")
        assert item.product_name == "Cherry Tomato Seeds"
        assert item.variant_name == "10g pack"

    def test_existing_line_is_incremented(self, services, customer, catalog) -> None:
        variant_id = catalog["small"].id
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=variant_id, quantity=2))
        item = services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=variant_id, quantity=3))

        assert item.quantity == 5
        assert len(services.cart.get_cart_items(customer.id)) == 1

    def test_missing_variant_is_not_found(self, services, customer, catalog) -> None:
        with pytest.raises(NotFoundError):
            services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=9999, quantity=1))

    def test_inactive_variant_is_not_found(self, services, customer, catalog) -> None:
        with pytest.raises(NotFoundError):
            services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["retired"].id, quantity=1))

    @pytest.mark.parametrize("quantity", [0, -1, 1001])
    def test_quantity_out_of_range_is_rejected(self, services, customer, catalog, quantity) -> None:
        with pytest.raises(ValidationError) as exc_info:
            services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["small"].id, quantity=quantity))

        assert exc_info.value.payload["errors"][0]["field"] == "quantity"


class TestUpdateAndRemove:
    """Tests for changing and removing cart lines."""

    def test_update_sets_quantity(self, services, customer, catalog) -> None:
        variant_id = catalog["small"].id
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=variant_id, quantity=2))

        assert services.cart.update_cart_item(customer.id, UpdateCartItemRequest(variant_id=variant_id, quantity=7))
        assert services.cart.get_cart_items(customer.id)[0].quantity == 7

    def test_update_to_zero_removes_line(self, services, customer, catalog) -> None:
        variant_id = catalog["small"].id
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=variant_id, quantity=2))

        assert services.cart.update_cart_item(customer.id, UpdateCartItemRequest(variant_id=variant_id, quantity=0))
        assert services.cart.get_cart_items(customer.id) == []

    def test_update_missing_line_returns_false(self, services, customer, catalog) -> None:
        dto = UpdateCartItemRequest(variant_id=catalog["small"].id, quantity=4)

        assert services.cart.update_cart_item(customer.id, dto) is False

    def test_remove_missing_line_returns_false(self, services, customer, catalog) -> None:
        assert services.cart.remove_from_cart(customer.id, catalog["small"].id) is False

    def test_clear_only_touches_own_cart(self, services, customer, other_customer, catalog) -> None:
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["small"].id, quantity=1))
        services.cart.add_to_cart(other_customer.id, AddToCartRequest(variant_id=catalog["small"].id, quantity=1))

        services.cart.clear_cart(customer.id)

        assert services.cart.get_cart_items(customer.id) == []
        assert len(services.cart.get_cart_items(other_customer.id)) == 1


class TestTotals:
    """Tests for cart totals and counts."""

    def test_total_uses_live_prices(self, services, uow, customer, catalog) -> None:
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["small"].id, quantity=2))
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["large"].id, quantity=1))
        assert services.cart.get_cart_total(customer.id) == Decimal("20.00")

        large = catalog["large"]
        large.price = Decimal("12.50")
        uow.variants.update(large, "price")

        assert services.cart.get_cart_total(customer.id) == Decimal("22.50")

    def test_count_sums_quantities(self, services, customer, catalog) -> None:
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["small"].id, quantity=2))
        services.cart.add_to_cart(customer.id, AddToCartRequest(variant_id=catalog["large"].id, quantity=3))

        assert services.cart.get_cart_item_count(customer.id) == 5

    def test_empty_cart_totals_are_zero(self, services, customer) -> None:
        assert services.cart.get_cart_total(customer.id) == Decimal("0.00")
        assert services.cart.get_cart_item_count(customer.id) == 0
