from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import CalculateDiscountRequest, CouponDto, CreateCouponRequest, UpdateCouponRequest
from agristore.models.entities import Coupon, to_money, utcnow
from agristore.models.validation import (
    ensure_valid,
    validate_calculate_discount,
    validate_create_coupon,
    validate_update_coupon,
)
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import DuplicateError
from agristore.utils.logging import get_logger

log = get_logger(__name__)

DUPLICATE_CODE_MESSAGE = "Coupon code already exists"


class CouponService:
    """
    Flat-amount coupons. A coupon is valid while it is active and the current
    time lies inside its start/end window (both ends inclusive).
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def get_all(self) -> List[CouponDto]:
        now = utcnow()
        return [mapping.coupon_to_dto(c, now) for c in self.uow.coupons.find()]

    def get_by_id(self, coupon_id: int) -> Optional[CouponDto]:
        coupon = self.uow.coupons.get_by_id(coupon_id)
        return mapping.coupon_to_dto(coupon) if coupon else None

    def get_by_code(self, code: str) -> Optional[CouponDto]:
        coupon = self.uow.coupons.get_by_code(code)
        return mapping.coupon_to_dto(coupon) if coupon else None

    def get_active(self) -> List[CouponDto]:
        now = utcnow()
        return [mapping.coupon_to_dto(c, now) for c in self.uow.coupons.get_active(now)]

    def is_code_unique(self, code: str, exclude_id: Optional[int] = None) -> bool:
        return self.uow.coupons.is_code_unique(code, exclude_id)

    def create(self, dto: CreateCouponRequest) -> CouponDto:
        ensure_valid(validate_create_coupon(dto))
        if not self.is_code_unique(dto.code):
            raise DuplicateError(DUPLICATE_CODE_MESSAGE)
        coupon = self.uow.coupons.add(Coupon(
            code=dto.code,
            discount_value=to_money(dto.discount_value),
            start_date=dto.start_date,
            end_date=dto.end_date,
            is_active=True if dto.is_active is None else dto.is_active,
        ))
        log.info("Coupon %s created (discount %s)", coupon.code, coupon.discount_value)
        return mapping.coupon_to_dto(coupon)

    def update(self, coupon_id: int, dto: UpdateCouponRequest) -> Optional[CouponDto]:
        ensure_valid(validate_update_coupon(dto))
        coupon = self.uow.coupons.get_by_id(coupon_id)
        if coupon is None:
            return None
        if dto.code is not None and dto.code != coupon.code:
            if not self.is_code_unique(dto.code, exclude_id=coupon.id):
                raise DuplicateError(DUPLICATE_CODE_MESSAGE)
            coupon.code = dto.code
        if dto.discount_value is not None:
            coupon.discount_value = to_money(dto.discount_value)
        if dto.start_date is not None:
            coupon.start_date = dto.start_date
        if dto.end_date is not None:
            coupon.end_date = dto.end_date
        if dto.is_active is not None:
            coupon.is_active = dto.is_active
        ensure_valid(validate_update_coupon(UpdateCouponRequest(start_date=coupon.start_date, end_date=coupon.end_date)))
        self.uow.coupons.update(coupon)
        return mapping.coupon_to_dto(coupon)

    def delete(self, coupon_id: int) -> bool:
        """Soft delete: the coupon stays for orders that reference it."""
        coupon = self.uow.coupons.get_by_id(coupon_id)
        if coupon is None:
            return False
        coupon.is_active = False
        self.uow.coupons.update(coupon, "is_active")
        log.info("Coupon %s deactivated", coupon.code)
        return True

    def validate_coupon(self, code: str, now: Optional[datetime] = None) -> bool:
        coupon = self.uow.coupons.get_by_code(code) if code else None
        return coupon is not None and coupon.is_valid(now or utcnow())

    def calculate_discount(self, dto: CalculateDiscountRequest, now: Optional[datetime] = None) -> Decimal:
        """The coupon's flat value when valid, else zero. Not capped at the order amount."""
        ensure_valid(validate_calculate_discount(dto))
        coupon = self.uow.coupons.get_by_code(dto.code)
        if coupon is None or not coupon.is_valid(now or utcnow()):
            return to_money(0)
        return coupon.discount_value
