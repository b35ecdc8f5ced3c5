from flask import jsonify
from flask_login import login_required

from . import bp
from agristore.models.dtos import AddToCartRequest, UpdateCartItemRequest
from agristore.services import get_services
from agristore.utils.auth import ensure_owner_or_admin
from agristore.utils.exceptions import NotFoundError
from agristore.utils.helpers import get_json_body


@bp.route("/user/<int:user_id>", methods=["GET"])
@login_required
def get_cart(user_id: int):
    ensure_owner_or_admin(user_id)
    return jsonify(get_services().cart.get_cart_items(user_id))


@bp.route("/user/<int:user_id>/add", methods=["POST"])
@login_required
def add_to_cart(user_id: int):
    ensure_owner_or_admin(user_id)
    item = get_services().cart.add_to_cart(user_id, AddToCartRequest.from_dict(get_json_body()))
    return jsonify(item)


@bp.route("/user/<int:user_id>/update", methods=["PUT"])
@login_required
def update_cart_item(user_id: int):
    ensure_owner_or_admin(user_id)
    dto = UpdateCartItemRequest.from_dict(get_json_body())
    if not get_services().cart.update_cart_item(user_id, dto):
        raise NotFoundError("Cart item not found")
    return "", 204


@bp.route("/user/<int:user_id>/remove/<int:variant_id>", methods=["DELETE"])
@login_required
def remove_from_cart(user_id: int, variant_id: int):
    ensure_owner_or_admin(user_id)
    if not get_services().cart.remove_from_cart(user_id, variant_id):
        raise NotFoundError("Cart item not found")
    return "", 204


@bp.route("/user/<int:user_id>/total", methods=["GET"])
@login_required
def cart_total(user_id: int):
    ensure_owner_or_admin(user_id)
    return jsonify({"total": get_services().cart.get_cart_total(user_id)})


@bp.route("/user/<int:user_id>/count", methods=["GET"])
@login_required
def cart_count(user_id: int):
    ensure_owner_or_admin(user_id)
    return jsonify({"count": get_services().cart.get_cart_item_count(user_id)})


@bp.route("/user/<int:user_id>/clear", methods=["DELETE"])
@login_required
def clear_cart(user_id: int):
    ensure_owner_or_admin(user_id)
    get_services().cart.clear_cart(user_id)
    return "", 204
