from flask import current_app, jsonify

from . import bp
from agristore.models.dtos import CreateVariantRequest, UpdateStockRequest, UpdateVariantRequest
from agristore.services import get_services
from agristore.utils.auth import admin_required
from agristore.utils.exceptions import BadRequestError, NotFoundError
from agristore.utils.helpers import get_json_body


@bp.route("", methods=["GET"])
def list_variants():
    return jsonify(get_services().variants.get_all())


@bp.route("/<int:variant_id>", methods=["GET"])
def get_variant(variant_id: int):
    variant = get_services().variants.get_variant(variant_id)
    if variant is None:
        raise NotFoundError(f"Product variant with ID {variant_id} not found")
    return jsonify(variant)


@bp.route("/by-product/<int:product_id>", methods=["GET"])
def variants_by_product(product_id: int):
    return jsonify(get_services().variants.get_by_product(product_id))


@bp.route("/low-stock", methods=["GET"])
@bp.route("/low-stock/<int:threshold>", methods=["GET"])
def low_stock(threshold=None):
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    return jsonify(get_services().variants.get_low_stock(threshold))


@bp.route("", methods=["POST"])
@admin_required
def create_variant():
    variant = get_services().variants.create(CreateVariantRequest.from_dict(get_json_body()))
    return jsonify(variant), 201


@bp.route("/<int:variant_id>", methods=["PUT"])
@admin_required
def update_variant(variant_id: int):
    variant = get_services().variants.update(variant_id, UpdateVariantRequest.from_dict(get_json_body()))
    if variant is None:
        raise NotFoundError(f"Product variant with ID {variant_id} not found")
    return jsonify(variant)


@bp.route("/update-stock/<int:variant_id>", methods=["PUT"])
@admin_required
def update_stock(variant_id: int):
    services = get_services()
    if services.variants.get_variant(variant_id) is None:
        raise NotFoundError(f"Product variant with ID {variant_id} not found")
    if not services.variants.update_stock(variant_id, UpdateStockRequest.from_dict(get_json_body())):
        raise BadRequestError("Insufficient stock")
    return "", 204


@bp.route("/<int:variant_id>", methods=["DELETE"])
@admin_required
def delete_variant(variant_id: int):
    if not get_services().variants.delete(variant_id):
        raise NotFoundError(f"Product variant with ID {variant_id} not found")
    return "", 204
