from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import CreateVariantRequest, UpdateStockRequest, UpdateVariantRequest, VariantDto
from agristore.models.entities import ProductVariant, to_money
from agristore.models.validation import (
    ensure_valid,
    validate_create_variant,
    validate_update_stock,
    validate_update_variant,
)
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import NotFoundError
from agristore.utils.logging import get_logger

log = get_logger(__name__)


class ProductVariantService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def _to_dtos(self, variants: List[ProductVariant]) -> List[VariantDto]:
        names = {}
        for product_id in {v.product_id for v in variants}:
            product = self.uow.products.get_by_id(product_id)
            names[product_id] = product.name if product else None
        return [mapping.variant_to_dto(v, names.get(v.product_id)) for v in variants]

    def get_all(self) -> List[VariantDto]:
        return self._to_dtos(self.uow.variants.find())

    def get_variant(self, variant_id: int) -> Optional[VariantDto]:
        variant = self.uow.variants.get_by_id(variant_id)
        return self._to_dtos([variant])[0] if variant else None

    def get_by_product(self, product_id: int) -> List[VariantDto]:
        return self._to_dtos(self.uow.variants.get_by_product(product_id))

    def get_low_stock(self, threshold: int) -> List[VariantDto]:
        """Active variants whose stock is at or below ``threshold``."""
        return self._to_dtos(self.uow.variants.get_low_stock(threshold))

    def create(self, dto: CreateVariantRequest) -> VariantDto:
        ensure_valid(validate_create_variant(dto))
        if self.uow.products.get_by_id(dto.product_id) is None:
            raise NotFoundError(f"Product with ID {dto.product_id} not found")
        variant = self.uow.variants.add(ProductVariant(
            product_id=dto.product_id,
            name=dto.name or None,
            price=to_money(dto.price),
            stock_quantity=dto.stock_quantity or 0,
            is_active=True if dto.is_active is None else dto.is_active,
        ))
        log.info("Variant %s added to product %s", variant.id, variant.product_id)
        return self._to_dtos([variant])[0]

    def update(self, variant_id: int, dto: UpdateVariantRequest) -> Optional[VariantDto]:
        ensure_valid(validate_update_variant(dto))
        variant = self.uow.variants.get_by_id(variant_id)
        if variant is None:
            return None
        if "name" in dto.provided:
            variant.name = dto.name or None
        if dto.price is not None:
            variant.price = to_money(dto.price)
        if dto.stock_quantity is not None:
            variant.stock_quantity = dto.stock_quantity
        if dto.is_active is not None:
            variant.is_active = dto.is_active
        self.uow.variants.update(variant)
        return self._to_dtos([variant])[0]

    def delete(self, variant_id: int) -> bool:
        variant = self.uow.variants.get_by_id(variant_id)
        if variant is None:
            return False
        variant.is_active = False
        self.uow.variants.update(variant, "is_active")
        log.info("Variant %s deactivated", variant_id)
        return True

    def update_stock(self, variant_id: int, dto: UpdateStockRequest) -> bool:
        """Deduct ``dto.quantity`` from stock. False when missing or short of stock."""
        ensure_valid(validate_update_stock(dto))
        if self.uow.variants.get_by_id(variant_id) is None:
            return False
        if not self.uow.variants.deduct_stock(variant_id, dto.quantity):
            log.warning("Insufficient stock on variant %s for %s units", variant_id, dto.quantity)
            return False
        return True
