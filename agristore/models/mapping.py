"""
Explicit record -> transfer object conversions.

Related rows (product of a variant, role of a user, ...) are passed in by the
caller, which loads them with an explicit query.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from . import dtos
from .entities import (
    CartItem,
    Category,
    Coupon,
    Order,
    OrderDetail,
    Product,
    ProductVariant,
    Review,
    User,
    UserAddress,
    to_money,
)


def cart_item_to_dto(item: CartItem, variant: ProductVariant, product: Optional[Product]) -> dtos.CartItemDto:
    return dtos.CartItemDto(
        id=item.id,
        user_id=item.user_id,
        variant_id=item.variant_id,
        product_name=product.name if product else "",
        variant_name=variant.name,
        image_url=product.image_url if product else None,
        price=variant.price,
        quantity=item.quantity,
        total_price=to_money(variant.price * item.quantity),
    )


def order_detail_to_dto(
    detail: OrderDetail, variant: Optional[ProductVariant], product: Optional[Product]
) -> dtos.OrderDetailDto:
    return dtos.OrderDetailDto(
        id=detail.id,
        order_id=detail.order_id,
        variant_id=detail.variant_id,
        product_name=product.name if product else "",
        variant_name=variant.name if variant else None,
        image_url=product.image_url if product else None,
        quantity=detail.quantity,
        unit_price=detail.unit_price,
        total_price=to_money(detail.unit_price * detail.quantity),
    )


def order_to_dto(
    order: Order,
    details: Iterable[dtos.OrderDetailDto] = (),
    coupon_code: Optional[str] = None,
) -> dtos.OrderDto:
    return dtos.OrderDto(
        id=order.id,
        user_id=order.user_id,
        order_date=order.order_date,
        shipping_address=order.shipping_address,
        total_amount=order.total_amount,
        shipping_fee=order.shipping_fee,
        status=order.status,
        payment_method=order.payment_method,
        note=order.note,
        coupon_id=order.coupon_id,
        coupon_code=coupon_code,
        details=list(details),
    )


def coupon_to_dto(coupon: Coupon, now: Optional[datetime] = None) -> dtos.CouponDto:
    return dtos.CouponDto(
        id=coupon.id,
        code=coupon.code,
        discount_value=coupon.discount_value,
        start_date=coupon.start_date,
        end_date=coupon.end_date,
        is_active=coupon.is_active,
        is_valid=coupon.is_valid(now),
    )


def review_to_dto(review: Review, username: Optional[str] = None,
                  product_name: Optional[str] = None) -> dtos.ReviewDto:
    return dtos.ReviewDto(
        id=review.id,
        user_id=review.user_id,
        username=username,
        product_id=review.product_id,
        product_name=product_name,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
    )


def address_to_dto(address: UserAddress) -> dtos.AddressDto:
    return dtos.AddressDto(
        id=address.id,
        user_id=address.user_id,
        address_line=address.address_line,
        is_default=address.is_default,
    )


def category_to_dto(category: Category) -> dtos.CategoryDto:
    return dtos.CategoryDto(id=category.id, name=category.name, parent_id=category.parent_id)


def category_with_subcategories_to_dto(
    category: Category, subcategories: Iterable[Category]
) -> dtos.CategoryWithSubcategoriesDto:
    return dtos.CategoryWithSubcategoriesDto(
        id=category.id,
        name=category.name,
        parent_id=category.parent_id,
        subcategories=[category_to_dto(sub) for sub in subcategories],
    )


def variant_to_dto(variant: ProductVariant, product_name: Optional[str] = None) -> dtos.VariantDto:
    return dtos.VariantDto(
        id=variant.id,
        product_id=variant.product_id,
        product_name=product_name,
        name=variant.name,
        price=variant.price,
        stock_quantity=variant.stock_quantity,
        is_active=variant.is_active,
    )


def product_to_dto(
    product: Product, category_name: Optional[str], variants: Iterable[ProductVariant] = ()
) -> dtos.ProductDto:
    return dtos.ProductDto(
        id=product.id,
        category_id=product.category_id,
        category_name=category_name,
        name=product.name,
        description=product.description,
        image_url=product.image_url,
        supplier_name=product.supplier_name,
        is_active=product.is_active,
        created_at=product.created_at,
        variants=[variant_to_dto(v, product.name) for v in variants],
    )


def product_to_list_dto(
    product: Product, category_name: Optional[str], price_range: Optional[Tuple[Decimal, Decimal]]
) -> dtos.ProductListDto:
    min_price, max_price = price_range or (to_money(0), to_money(0))
    return dtos.ProductListDto(
        id=product.id,
        name=product.name,
        image_url=product.image_url,
        category_name=category_name,
        min_price=min_price,
        max_price=max_price,
        is_active=product.is_active,
    )


def user_to_dto(user: User, role_name: Optional[str]) -> dtos.UserDto:
    return dtos.UserDto(
        id=user.id,
        full_name=user.full_name,
        username=user.username,
        email=user.email,
        phone=user.phone,
        address=user.address,
        role=role_name,
        is_active=user.is_active,
        created_at=user.created_at,
    )


def paged(items: List, total_count: int, params: dtos.PaginationParams) -> dtos.PagedResult:
    return dtos.PagedResult(
        items=items, total_count=total_count, page_number=params.page_number, page_size=params.page_size
    )
