from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import (
    CreateProductRequest,
    PagedResult,
    PaginationParams,
    ProductDto,
    ProductFilterParams,
    ProductListDto,
    UpdateProductRequest,
)
from agristore.models.entities import Product
from agristore.models.validation import (
    ensure_valid,
    validate_create_product,
    validate_product_filter,
    validate_update_product,
)
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import NotFoundError
from agristore.utils.logging import get_logger

log = get_logger(__name__)

PRODUCT_FIELDS = ("name", "category_id", "description", "image_url", "supplier_name")


class ProductService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def _to_list_dtos(self, products: List[Product]) -> List[ProductListDto]:
        categories = self.uow.categories.names_by_id(p.category_id for p in products)
        ranges = self.uow.products.price_ranges(p.id for p in products)
        return [
            mapping.product_to_list_dto(p, categories.get(p.category_id), ranges.get(p.id))
            for p in products
        ]

    def _to_dto(self, product: Product) -> ProductDto:
        category = self.uow.categories.get_by_id(product.category_id) if product.category_id else None
        return mapping.product_to_dto(
            product,
            category.name if category else None,
            self.uow.variants.get_by_product(product.id),
        )

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.uow.categories.get_by_id(category_id) is None:
            raise NotFoundError(f"Category with ID {category_id} not found")

    def get_products(self, params: ProductFilterParams) -> PagedResult:
        """Active products only; the price filters look at active variants."""
        ensure_valid(validate_product_filter(params))
        products, total = self.uow.products.filter(
            search=params.search,
            category_id=params.category_id,
            min_price=params.min_price,
            max_price=params.max_price,
            sort_by=params.sort_by,
            sort_desc=params.sort_desc,
            page_number=params.page_number,
            page_size=params.page_size,
        )
        return mapping.paged(self._to_list_dtos(products), total, params)

    def get_product(self, product_id: int) -> Optional[ProductDto]:
        product = self.uow.products.get_by_id(product_id)
        return self._to_dto(product) if product else None

    def get_products_by_category(self, category_id: int, params: PaginationParams) -> PagedResult:
        return self.get_products(ProductFilterParams(
            page_number=params.page_number, page_size=params.page_size, category_id=category_id
        ))

    def search_products(self, term: str, params: PaginationParams) -> PagedResult:
        return self.get_products(ProductFilterParams(
            page_number=params.page_number, page_size=params.page_size, search=(term or "").strip() or None
        ))

    def get_featured_products(self, count: int) -> List[ProductListDto]:
        return self._to_list_dtos(self.uow.products.get_featured(max(count, 0)))

    def create(self, dto: CreateProductRequest) -> ProductDto:
        ensure_valid(validate_create_product(dto))
        self._check_category(dto.category_id)
        product = self.uow.products.add(Product(
            name=dto.name,
            category_id=dto.category_id,
            description=dto.description or None,
            image_url=dto.image_url or None,
            supplier_name=dto.supplier_name or None,
            is_active=True if dto.is_active is None else dto.is_active,
        ))
        log.info("Product %s created (id=%s)", product.name, product.id)
        return self._to_dto(product)

    def update(self, product_id: int, dto: UpdateProductRequest) -> Optional[ProductDto]:
        ensure_valid(validate_update_product(dto))
        product = self.uow.products.get_by_id(product_id)
        if product is None:
            return None
        if "category_id" in dto.provided:
            self._check_category(dto.category_id)
        for name in PRODUCT_FIELDS:
            if name in dto.provided:
                value = getattr(dto, name)
                if name == "name" and not value:
                    continue
                setattr(product, name, value if value != "" else None)
        if dto.is_active is not None:
            product.is_active = dto.is_active
        self.uow.products.update(product)
        return self._to_dto(product)

    def delete(self, product_id: int) -> bool:
        """Soft delete: the product is hidden from listings."""
        product = self.uow.products.get_by_id(product_id)
        if product is None:
            return False
        product.is_active = False
        self.uow.products.update(product, "is_active")
        log.info("Product %s deactivated", product.name)
        return True
