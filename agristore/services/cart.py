from decimal import Decimal
from typing import List

from agristore.models import mapping
from agristore.models.dtos import AddToCartRequest, CartItemDto, UpdateCartItemRequest
from agristore.models.entities import CartItem, to_money
from agristore.models.validation import ensure_valid, validate_add_to_cart, validate_update_cart_item
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import NotFoundError
from agristore.utils.logging import get_logger

log = get_logger(__name__)


class CartService:
    """Per-user mapping of variant -> quantity. Prices are always read live."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def _to_dtos(self, items: List[CartItem]) -> List[CartItemDto]:
        variants = self.uow.variants.get_by_ids(item.variant_id for item in items)
        products = {
            pid: self.uow.products.get_by_id(pid)
            for pid in {v.product_id for v in variants.values()}
        }
        return [
            mapping.cart_item_to_dto(item, variants[item.variant_id], products.get(variants[item.variant_id].product_id))
            for item in items
            if item.variant_id in variants
        ]

    def get_cart_items(self, user_id: int) -> List[CartItemDto]:
        return self._to_dtos(self.uow.cart_items.get_by_user(user_id))

    def add_to_cart(self, user_id: int, dto: AddToCartRequest) -> CartItemDto:
        ensure_valid(validate_add_to_cart(dto))
        variant = self.uow.variants.get_by_id(dto.variant_id)
        if variant is None or not variant.is_active:
            raise NotFoundError(f"Product variant with ID {dto.variant_id} not found")

        line = self.uow.cart_items.get_line(user_id, dto.variant_id)
        if line is not None:
            line.quantity += dto.quantity
            self.uow.cart_items.update(line, "quantity")
        else:
            line = self.uow.cart_items.add(CartItem(user_id=user_id, variant_id=dto.variant_id, quantity=dto.quantity))
        log.info("User %s cart: variant %s now x%s", user_id, dto.variant_id, line.quantity)
        return self._to_dtos([line])[0]

    def update_cart_item(self, user_id: int, dto: UpdateCartItemRequest) -> bool:
        ensure_valid(validate_update_cart_item(dto))
        if dto.quantity <= 0:
            return self.remove_from_cart(user_id, dto.variant_id)
        line = self.uow.cart_items.get_line(user_id, dto.variant_id)
        if line is None:
            return False
        line.quantity = dto.quantity
        return self.uow.cart_items.update(line, "quantity")

    def remove_from_cart(self, user_id: int, variant_id: int) -> bool:
        return self.uow.cart_items.delete_where(user_id=user_id, variant_id=variant_id) > 0

    def clear_cart(self, user_id: int) -> bool:
        return self.uow.cart_items.clear(user_id) > 0

    def get_cart_total(self, user_id: int) -> Decimal:
        items = self.uow.cart_items.get_by_user(user_id)
        variants = self.uow.variants.get_by_ids(item.variant_id for item in items)
        return to_money(sum(
            (variants[item.variant_id].price * item.quantity for item in items if item.variant_id in variants),
            Decimal("0"),
        ))

    def get_cart_item_count(self, user_id: int) -> int:
        return self.uow.cart_items.quantity_sum(user_id)
