from flask import current_app, jsonify, request

from . import bp
from agristore.models.dtos import CreateProductRequest, PaginationParams, ProductFilterParams, UpdateProductRequest
from agristore.services import get_services
from agristore.utils.auth import admin_required
from agristore.utils.exceptions import NotFoundError
from agristore.utils.helpers import get_json_body


@bp.route("", methods=["GET"])
def list_products():
    return jsonify(get_services().products.get_products(ProductFilterParams.from_query(request.args)))


@bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    product = get_services().products.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product with ID {product_id} not found")
    return jsonify(product)


@bp.route("/category/<int:category_id>", methods=["GET"])
def products_by_category(category_id: int):
    params = PaginationParams.from_query(request.args)
    return jsonify(get_services().products.get_products_by_category(category_id, params))


@bp.route("/search", methods=["GET"])
def search_products():
    params = PaginationParams.from_query(request.args)
    return jsonify(get_services().products.search_products(request.args.get("term", ""), params))


@bp.route("/featured", methods=["GET"])
@bp.route("/featured/<int:count>", methods=["GET"])
def featured_products(count=None):
    if count is None:
        count = current_app.config["FEATURED_PRODUCT_COUNT"]
    return jsonify(get_services().products.get_featured_products(count))


@bp.route("", methods=["POST"])
@admin_required
def create_product():
    product = get_services().products.create(CreateProductRequest.from_dict(get_json_body()))
    return jsonify(product), 201


@bp.route("/<int:product_id>", methods=["PUT"])
@admin_required
def update_product(product_id: int):
    product = get_services().products.update(product_id, UpdateProductRequest.from_dict(get_json_body()))
    if product is None:
        raise NotFoundError(f"Product with ID {product_id} not found")
    return jsonify(product)


@bp.route("/<int:product_id>", methods=["DELETE"])
@admin_required
def delete_product(product_id: int):
    if not get_services().products.delete(product_id):
        raise NotFoundError(f"Product with ID {product_id} not found")
    return "", 204
