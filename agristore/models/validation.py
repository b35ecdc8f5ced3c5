"""
One ``validate_*`` function per request object. Each runs the matching form
from ``forms`` and returns a list of ``FieldError``; an empty list means the
request may proceed, and the parsed values (ints, Decimals, datetimes,
stripped strings) have been written back onto the request object.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, List, Type

from werkzeug.datastructures import MultiDict

from agristore.utils.exceptions import ValidationError

from . import dtos, forms


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


def ensure_valid(errors: List[FieldError]) -> None:
    if errors:
        raise ValidationError(errors=[e.to_dict() for e in errors])


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def formdata_of(request: Any) -> MultiDict:
    """Every non-null field of a request dataclass, as form input."""
    return MultiDict(
        (f.name, _render(getattr(request, f.name)))
        for f in fields(request)
        if f.name != "provided" and getattr(request, f.name) is not None
    )


def check(form_class: Type[forms.ApiForm], request: Any) -> List[FieldError]:
    formdata = formdata_of(request)
    form = form_class(formdata=formdata)
    if not form.validate():
        return [FieldError(name, message) for name, messages in form.errors.items() for message in messages]
    for field in form:
        if field.name in formdata:
            setattr(request, field.name, field.data)
    return []


def validate_add_to_cart(dto: dtos.AddToCartRequest) -> List[FieldError]:
    return check(forms.AddToCartForm, dto)


def validate_update_cart_item(dto: dtos.UpdateCartItemRequest) -> List[FieldError]:
    return check(forms.UpdateCartItemForm, dto)


def validate_create_order(dto: dtos.CreateOrderRequest) -> List[FieldError]:
    return check(forms.CreateOrderForm, dto)


def validate_order_status(dto: dtos.UpdateOrderStatusRequest) -> List[FieldError]:
    return check(forms.OrderStatusForm, dto)


def validate_create_coupon(dto: dtos.CreateCouponRequest) -> List[FieldError]:
    return check(forms.CreateCouponForm, dto)


def validate_update_coupon(dto: dtos.UpdateCouponRequest) -> List[FieldError]:
    return check(forms.CouponForm, dto)


def validate_validate_coupon(dto: dtos.ValidateCouponRequest) -> List[FieldError]:
    return check(forms.CouponCodeForm, dto)


def validate_calculate_discount(dto: dtos.CalculateDiscountRequest) -> List[FieldError]:
    return check(forms.CalculateDiscountForm, dto)


def validate_create_review(dto: dtos.CreateReviewRequest) -> List[FieldError]:
    return check(forms.CreateReviewForm, dto)


def validate_update_review(dto: dtos.UpdateReviewRequest) -> List[FieldError]:
    return check(forms.UpdateReviewForm, dto)


def validate_create_address(dto: dtos.CreateAddressRequest) -> List[FieldError]:
    return check(forms.CreateAddressForm, dto)


def validate_update_address(dto: dtos.UpdateAddressRequest) -> List[FieldError]:
    return check(forms.UpdateAddressForm, dto)


def validate_create_category(dto: dtos.CreateCategoryRequest) -> List[FieldError]:
    return check(forms.CreateCategoryForm, dto)


def validate_update_category(dto: dtos.UpdateCategoryRequest) -> List[FieldError]:
    return check(forms.UpdateCategoryForm, dto)


def validate_create_product(dto: dtos.CreateProductRequest) -> List[FieldError]:
    return check(forms.CreateProductForm, dto)


def validate_update_product(dto: dtos.UpdateProductRequest) -> List[FieldError]:
    return check(forms.UpdateProductForm, dto)


def validate_create_variant(dto: dtos.CreateVariantRequest) -> List[FieldError]:
    return check(forms.CreateVariantForm, dto)


def validate_update_variant(dto: dtos.UpdateVariantRequest) -> List[FieldError]:
    return check(forms.UpdateVariantForm, dto)


def validate_update_stock(dto: dtos.UpdateStockRequest) -> List[FieldError]:
    return check(forms.UpdateStockForm, dto)


def validate_create_user(dto: dtos.CreateUserRequest) -> List[FieldError]:
    return check(forms.CreateUserForm, dto)


def validate_update_user(dto: dtos.UpdateUserRequest) -> List[FieldError]:
    return check(forms.UpdateUserForm, dto)


def validate_change_password(dto: dtos.ChangePasswordRequest) -> List[FieldError]:
    return check(forms.ChangePasswordForm, dto)


# Listing filters: only the filter fields are checked, paging is clamped by the params themselves.
def validate_order_filter(params: dtos.OrderFilterParams) -> List[FieldError]:
    return check(forms.OrderFilterForm, params)


def validate_product_filter(params: dtos.ProductFilterParams) -> List[FieldError]:
    return check(forms.ProductFilterForm, params)


def validate_review_filter(params: dtos.ReviewFilterParams) -> List[FieldError]:
    return check(forms.ReviewFilterForm, params)
