from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import (
    CategoryDto,
    CategoryWithSubcategoriesDto,
    CreateCategoryRequest,
    UpdateCategoryRequest,
)
from agristore.models.entities import Category
from agristore.models.validation import ensure_valid, validate_create_category, validate_update_category
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import BadRequestError, NotFoundError
from agristore.utils.logging import get_logger

log = get_logger(__name__)


class CategoryService:
    """Categories form a tree through ``parent_id`` and are hard deleted."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def get_all(self) -> List[CategoryDto]:
        return [mapping.category_to_dto(c) for c in self.uow.categories.find(order_by="name")]

    def get_category(self, category_id: int) -> Optional[CategoryDto]:
        category = self.uow.categories.get_by_id(category_id)
        return mapping.category_to_dto(category) if category else None

    def get_root_categories(self) -> List[CategoryDto]:
        return [mapping.category_to_dto(c) for c in self.uow.categories.get_roots()]

    def get_subcategories(self, category_id: int) -> List[CategoryDto]:
        return [mapping.category_to_dto(c) for c in self.uow.categories.get_subcategories(category_id)]

    def get_category_with_subcategories(self, category_id: int) -> Optional[CategoryWithSubcategoriesDto]:
        category = self.uow.categories.get_by_id(category_id)
        if category is None:
            return None
        return mapping.category_with_subcategories_to_dto(
            category, self.uow.categories.get_subcategories(category_id)
        )

    def _check_parent(self, parent_id: Optional[int], category_id: Optional[int] = None) -> None:
        if parent_id is None:
            return
        if parent_id == category_id:
            raise BadRequestError("A category cannot be its own parent")
        if self.uow.categories.get_by_id(parent_id) is None:
            raise NotFoundError(f"Parent category with ID {parent_id} not found")

    def create(self, dto: CreateCategoryRequest) -> CategoryDto:
        ensure_valid(validate_create_category(dto))
        self._check_parent(dto.parent_id)
        category = self.uow.categories.add(Category(name=dto.name, parent_id=dto.parent_id))
        log.info("Category %s created (id=%s)", category.name, category.id)
        return mapping.category_to_dto(category)

    def update(self, category_id: int, dto: UpdateCategoryRequest) -> Optional[CategoryDto]:
        ensure_valid(validate_update_category(dto))
        category = self.uow.categories.get_by_id(category_id)
        if category is None:
            return None
        if dto.name is not None:
            category.name = dto.name
        if "parent_id" in dto.provided:
            self._check_parent(dto.parent_id, category_id)
            category.parent_id = dto.parent_id
        self.uow.categories.update(category)
        return mapping.category_to_dto(category)

    def delete(self, category_id: int) -> bool:
        category = self.uow.categories.get_by_id(category_id)
        if category is None:
            return False
        if self.uow.categories.has_products(category_id):
            raise BadRequestError("Cannot delete category with existing products")
        self.uow.categories.delete(category)
        log.info("Category %s deleted", category.name)
        return True
