from flask import jsonify

from . import bp
from agristore.models.dtos import CreateCategoryRequest, UpdateCategoryRequest
from agristore.services import get_services
from agristore.utils.auth import admin_required
from agristore.utils.exceptions import NotFoundError
from agristore.utils.helpers import get_json_body


@bp.route("", methods=["GET"])
def list_categories():
    return jsonify(get_services().categories.get_all())


@bp.route("/roots", methods=["GET"])
def root_categories():
    return jsonify(get_services().categories.get_root_categories())


@bp.route("/<int:category_id>", methods=["GET"])
def get_category(category_id: int):
    category = get_services().categories.get_category_with_subcategories(category_id)
    if category is None:
        raise NotFoundError(f"Category with ID {category_id} not found")
    return jsonify(category)


@bp.route("/<int:category_id>/subcategories", methods=["GET"])
def subcategories(category_id: int):
    return jsonify(get_services().categories.get_subcategories(category_id))


@bp.route("", methods=["POST"])
@admin_required
def create_category():
    category = get_services().categories.create(CreateCategoryRequest.from_dict(get_json_body()))
    return jsonify(category), 201


@bp.route("/<int:category_id>", methods=["PUT"])
@admin_required
def update_category(category_id: int):
    category = get_services().categories.update(category_id, UpdateCategoryRequest.from_dict(get_json_body()))
    if category is None:
        raise NotFoundError(f"Category with ID {category_id} not found")
    return jsonify(category)


@bp.route("/<int:category_id>", methods=["DELETE"])
@admin_required
def delete_category(category_id: int):
    if not get_services().categories.delete(category_id):
        raise NotFoundError(f"Category with ID {category_id} not found")
    return "", 204
