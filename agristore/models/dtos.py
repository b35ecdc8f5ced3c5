"""
Transfer objects: what the API accepts and what it returns.

Request objects are built from decoded JSON (or query strings) by
``from_dict`` and hold the values exactly as received. The matching
``validate_*`` function parses them through a WTForms form and writes the
typed values back, so services only read a request after validating it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, List, Mapping, Optional, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


class RequestDto:
    """Base for request objects; remembers which keys the client sent."""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]):
        data = data or {}
        values = {f.name: data[f.name] for f in fields(cls) if f.name != "provided" and f.name in data}  # type: ignore[arg-type]
        instance = cls(**values)
        instance.provided = frozenset(values)
        return instance


# ----------------------------------------------------------------------
# Pagination
# ----------------------------------------------------------------------
@dataclass
class PaginationParams:
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        self.page_number = max(1, _page_int(self.page_number, 1))
        self.page_size = max(1, min(_page_int(self.page_size, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE))

    @classmethod
    def from_query(cls, args: Mapping[str, Any]) -> "PaginationParams":
        return cls(args.get("page_number", 1), args.get("page_size", DEFAULT_PAGE_SIZE))


@dataclass
class PagedResult(Generic[T]):
    items: List[T]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int = field(init=False)
    has_previous: bool = field(init=False)
    has_next: bool = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = math.ceil(self.total_count / self.page_size) if self.page_size else 0
        self.has_previous = self.page_number > 1
        self.has_next = self.page_number < self.total_pages


def _page_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _flag(args: Mapping[str, Any], key: str, default: Optional[bool] = None) -> Optional[bool]:
    value = str(args.get(key, "")).strip().lower()
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    return default


def _optional(args: Mapping[str, Any], key: str) -> Any:
    value = args.get(key)
    return None if value in (None, "") else value


# ----------------------------------------------------------------------
# Cart
# ----------------------------------------------------------------------
@dataclass
class AddToCartRequest(RequestDto):
    variant_id: Any = None
    quantity: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateCartItemRequest(RequestDto):
    variant_id: Any = None
    quantity: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class CartItemDto:
    id: int
    user_id: int
    variant_id: int
    product_name: str
    variant_name: Optional[str]
    image_url: Optional[str]
    price: Decimal
    quantity: int
    total_price: Decimal


# ----------------------------------------------------------------------
# Orders
# ----------------------------------------------------------------------
@dataclass
class CreateOrderRequest(RequestDto):
    shipping_address: Any = None
    payment_method: Any = None
    note: Any = None
    coupon_code: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateOrderStatusRequest(RequestDto):
    status: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class OrderFilterParams(PaginationParams):
    status: Optional[str] = None
    user_id: Any = None
    from_date: Any = None
    to_date: Any = None
    sort_by: str = "order_date"
    sort_desc: bool = True

    @classmethod
    def from_query(cls, args: Mapping[str, Any]) -> "OrderFilterParams":
        return cls(
            page_number=args.get("page_number", 1),
            page_size=args.get("page_size", DEFAULT_PAGE_SIZE),
            status=args.get("status") or None,
            user_id=_optional(args, "user_id"),
            from_date=_optional(args, "from_date"),
            to_date=_optional(args, "to_date"),
            sort_by=args.get("sort_by") or "order_date",
            sort_desc=_flag(args, "sort_desc", True),
        )


@dataclass
class OrderDetailDto:
    id: int
    order_id: int
    variant_id: int
    product_name: str
    variant_name: Optional[str]
    image_url: Optional[str]
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass
class OrderDto:
    id: int
    user_id: int
    order_date: datetime
    shipping_address: Optional[str]
    total_amount: Decimal
    shipping_fee: Decimal
    status: str
    payment_method: Optional[str]
    note: Optional[str]
    coupon_id: Optional[int]
    coupon_code: Optional[str] = None
    details: List[OrderDetailDto] = field(default_factory=list)


@dataclass
class DailyStatisticsDto:
    date: date
    total_orders: int
    total_revenue: Decimal
    pending_orders: int
    delivered_orders: int
    cancelled_orders: int


# ----------------------------------------------------------------------
# Coupons
# ----------------------------------------------------------------------
@dataclass
class CreateCouponRequest(RequestDto):
    code: Any = None
    discount_value: Any = None
    start_date: Any = None
    end_date: Any = None
    is_active: Any = True
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateCouponRequest(RequestDto):
    code: Any = None
    discount_value: Any = None
    start_date: Any = None
    end_date: Any = None
    is_active: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class ValidateCouponRequest(RequestDto):
    code: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class CalculateDiscountRequest(RequestDto):
    code: Any = None
    order_amount: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class CouponDto:
    id: int
    code: str
    discount_value: Decimal
    start_date: datetime
    end_date: datetime
    is_active: bool
    is_valid: bool


# ----------------------------------------------------------------------
# Reviews
# ----------------------------------------------------------------------
@dataclass
class CreateReviewRequest(RequestDto):
    product_id: Any = None
    rating: Any = None
    comment: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateReviewRequest(RequestDto):
    rating: Any = None
    comment: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class ReviewFilterParams(PaginationParams):
    product_id: Any = None
    user_id: Any = None
    min_rating: Any = None
    max_rating: Any = None
    sort_by: str = "created_at"
    sort_desc: bool = True

    @classmethod
    def from_query(cls, args: Mapping[str, Any]) -> "ReviewFilterParams":
        return cls(
            page_number=args.get("page_number", 1),
            page_size=args.get("page_size", DEFAULT_PAGE_SIZE),
            product_id=_optional(args, "product_id"),
            user_id=_optional(args, "user_id"),
            min_rating=_optional(args, "min_rating"),
            max_rating=_optional(args, "max_rating"),
            sort_by=args.get("sort_by") or "created_at",
            sort_desc=_flag(args, "sort_desc", True),
        )


@dataclass
class ReviewDto:
    id: int
    user_id: int
    username: Optional[str]
    product_id: int
    product_name: Optional[str]
    rating: int
    comment: Optional[str]
    created_at: datetime


@dataclass
class ProductReviewSummaryDto:
    product_id: int
    total_reviews: int
    average_rating: float
    rating_counts: dict


# ----------------------------------------------------------------------
# Addresses
# ----------------------------------------------------------------------
@dataclass
class CreateAddressRequest(RequestDto):
    address_line: Any = None
    is_default: Any = False
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateAddressRequest(RequestDto):
    address_line: Any = None
    is_default: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class AddressDto:
    id: int
    user_id: int
    address_line: Optional[str]
    is_default: bool


# ----------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------
@dataclass
class CreateCategoryRequest(RequestDto):
    name: Any = None
    parent_id: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateCategoryRequest(RequestDto):
    name: Any = None
    parent_id: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class CategoryDto:
    id: int
    name: str
    parent_id: Optional[int]


@dataclass
class CategoryWithSubcategoriesDto:
    id: int
    name: str
    parent_id: Optional[int]
    subcategories: List[CategoryDto] = field(default_factory=list)


@dataclass
class CreateProductRequest(RequestDto):
    name: Any = None
    category_id: Any = None
    description: Any = None
    image_url: Any = None
    supplier_name: Any = None
    is_active: Any = True
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateProductRequest(RequestDto):
    name: Any = None
    category_id: Any = None
    description: Any = None
    image_url: Any = None
    supplier_name: Any = None
    is_active: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class ProductFilterParams(PaginationParams):
    search: Optional[str] = None
    category_id: Any = None
    min_price: Any = None
    max_price: Any = None
    sort_by: str = "created_at"
    sort_desc: bool = True

    @classmethod
    def from_query(cls, args: Mapping[str, Any]) -> "ProductFilterParams":
        return cls(
            page_number=args.get("page_number", 1),
            page_size=args.get("page_size", DEFAULT_PAGE_SIZE),
            search=(args.get("search") or "").strip() or None,
            category_id=_optional(args, "category_id"),
            min_price=_optional(args, "min_price"),
            max_price=_optional(args, "max_price"),
            sort_by=args.get("sort_by") or "created_at",
            sort_desc=_flag(args, "sort_desc", True),
        )


@dataclass
class VariantDto:
    id: int
    product_id: int
    product_name: Optional[str]
    name: Optional[str]
    price: Decimal
    stock_quantity: int
    is_active: bool


@dataclass
class ProductDto:
    id: int
    category_id: Optional[int]
    category_name: Optional[str]
    name: str
    description: Optional[str]
    image_url: Optional[str]
    supplier_name: Optional[str]
    is_active: bool
    created_at: datetime
    variants: List[VariantDto] = field(default_factory=list)


@dataclass
class ProductListDto:
    id: int
    name: str
    image_url: Optional[str]
    category_name: Optional[str]
    min_price: Decimal
    max_price: Decimal
    is_active: bool


@dataclass
class CreateVariantRequest(RequestDto):
    product_id: Any = None
    name: Any = None
    price: Any = None
    stock_quantity: Any = 0
    is_active: Any = True
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateVariantRequest(RequestDto):
    name: Any = None
    price: Any = None
    stock_quantity: Any = None
    is_active: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateStockRequest(RequestDto):
    quantity: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------
@dataclass
class CreateUserRequest(RequestDto):
    full_name: Any = None
    username: Any = None
    password: Any = None
    email: Any = None
    phone: Any = None
    address: Any = None
    role: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UpdateUserRequest(RequestDto):
    full_name: Any = None
    email: Any = None
    phone: Any = None
    address: Any = None
    role: Any = None
    is_active: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class ChangePasswordRequest(RequestDto):
    current_password: Any = None
    new_password: Any = None
    provided: frozenset = field(default_factory=frozenset, repr=False, compare=False)


@dataclass
class UserFilterParams(PaginationParams):
    search: Optional[str] = None
    role: Optional[str] = None
    is_active: Any = None
    sort_by: str = "created_at"
    sort_desc: bool = True

    @classmethod
    def from_query(cls, args: Mapping[str, Any]) -> "UserFilterParams":
        return cls(
            page_number=args.get("page_number", 1),
            page_size=args.get("page_size", DEFAULT_PAGE_SIZE),
            search=(args.get("search") or "").strip() or None,
            role=args.get("role") or None,
            is_active=_flag(args, "is_active"),
            sort_by=args.get("sort_by") or "created_at",
            sort_desc=_flag(args, "sort_desc", True),
        )


@dataclass
class UserDto:
    id: int
    full_name: str
    username: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    role: Optional[str]
    is_active: bool
    created_at: datetime
