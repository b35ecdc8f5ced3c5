from flask import jsonify
from flask_login import login_required

from . import bp
from agristore.models.dtos import CreateAddressRequest, UpdateAddressRequest
from agristore.services import get_services
from agristore.utils.auth import ensure_owner_or_admin
from agristore.utils.exceptions import NotFoundError
from agristore.utils.helpers import get_json_body


def _ensure_address_owner(address_id: int) -> None:
    owner_id = get_services().addresses.get_owner_id(address_id)
    if owner_id is None:
        raise NotFoundError(f"Address with ID {address_id} not found")
    ensure_owner_or_admin(owner_id)


@bp.route("/user/<int:user_id>", methods=["GET"])
@login_required
def addresses_by_user(user_id: int):
    ensure_owner_or_admin(user_id)
    return jsonify(get_services().addresses.get_addresses(user_id))


@bp.route("/user/<int:user_id>/default", methods=["GET"])
@login_required
def default_address(user_id: int):
    ensure_owner_or_admin(user_id)
    address = get_services().addresses.get_default_address(user_id)
    if address is None:
        raise NotFoundError(f"No default address for user {user_id}")
    return jsonify(address)


@bp.route("/user/<int:user_id>", methods=["POST"])
@login_required
def create_address(user_id: int):
    ensure_owner_or_admin(user_id)
    address = get_services().addresses.create(user_id, CreateAddressRequest.from_dict(get_json_body()))
    return jsonify(address), 201


@bp.route("/<int:address_id>", methods=["PUT"])
@login_required
def update_address(address_id: int):
    _ensure_address_owner(address_id)
    get_services().addresses.update(address_id, UpdateAddressRequest.from_dict(get_json_body()))
    return "", 204


@bp.route("/<int:address_id>", methods=["DELETE"])
@login_required
def delete_address(address_id: int):
    _ensure_address_owner(address_id)
    get_services().addresses.delete(address_id)
    return "", 204


@bp.route("/user/<int:user_id>/default/<int:address_id>", methods=["PUT"])
@login_required
def set_default_address(user_id: int, address_id: int):
    ensure_owner_or_admin(user_id)
    if not get_services().addresses.set_default_address(user_id, address_id):
        raise NotFoundError(f"Address with ID {address_id} for user {user_id} not found")
    return "", 204
