from flask import jsonify

from . import bp
from agristore.models.dtos import (
    CalculateDiscountRequest,
    CreateCouponRequest,
    UpdateCouponRequest,
    ValidateCouponRequest,
)
from agristore.models.entities import to_money
from agristore.models.validation import ensure_valid, validate_validate_coupon
from agristore.services import get_services
from agristore.utils.auth import admin_required
from agristore.utils.exceptions import NotFoundError
from agristore.utils.helpers import get_json_body


@bp.route("", methods=["GET"])
@admin_required
def list_coupons():
    return jsonify(get_services().coupons.get_all())


@bp.route("/<int:coupon_id>", methods=["GET"])
def get_coupon(coupon_id: int):
    coupon = get_services().coupons.get_by_id(coupon_id)
    if coupon is None:
        raise NotFoundError(f"Coupon with ID {coupon_id} not found")
    return jsonify(coupon)


@bp.route("/code/<code>", methods=["GET"])
def get_coupon_by_code(code: str):
    coupon = get_services().coupons.get_by_code(code)
    if coupon is None:
        raise NotFoundError(f"Coupon with code {code} not found")
    return jsonify(coupon)


@bp.route("/active", methods=["GET"])
def active_coupons():
    return jsonify(get_services().coupons.get_active())


@bp.route("", methods=["POST"])
@admin_required
def create_coupon():
    coupon = get_services().coupons.create(CreateCouponRequest.from_dict(get_json_body()))
    return jsonify(coupon), 201


@bp.route("/<int:coupon_id>", methods=["PUT"])
@admin_required
def update_coupon(coupon_id: int):
    coupon = get_services().coupons.update(coupon_id, UpdateCouponRequest.from_dict(get_json_body()))
    if coupon is None:
        raise NotFoundError(f"Coupon with ID {coupon_id} not found")
    return jsonify(coupon)


@bp.route("/<int:coupon_id>", methods=["DELETE"])
@admin_required
def delete_coupon(coupon_id: int):
    if not get_services().coupons.delete(coupon_id):
        raise NotFoundError(f"Coupon with ID {coupon_id} not found")
    return "", 204


@bp.route("/validate", methods=["POST"])
def validate_coupon():
    dto = ValidateCouponRequest.from_dict(get_json_body())
    ensure_valid(validate_validate_coupon(dto))
    is_valid = get_services().coupons.validate_coupon(dto.code)
    return jsonify({
        "is_valid": is_valid,
        "message": "Coupon is valid" if is_valid else "Coupon is invalid or expired",
    })


@bp.route("/calculate-discount", methods=["POST"])
def calculate_discount():
    dto = CalculateDiscountRequest.from_dict(get_json_body())
    discount = get_services().coupons.calculate_discount(dto)
    return jsonify({"discount": discount, "final_amount": to_money(dto.order_amount - discount)})
