from flask import jsonify, request
from flask_login import current_user, login_required

from . import bp
from agristore.models.dtos import ChangePasswordRequest, CreateUserRequest, UpdateUserRequest, UserFilterParams
from agristore.services import get_services
from agristore.utils.auth import admin_required, ensure_owner_or_admin
from agristore.utils.exceptions import AuthorizationError, BadRequestError, NotFoundError
from agristore.utils.helpers import get_json_body

ADMIN_ONLY_FIELDS = ("role", "is_active")


@bp.route("", methods=["GET"])
@admin_required
def list_users():
    return jsonify(get_services().users.get_users(UserFilterParams.from_query(request.args)))


@bp.route("/<int:user_id>", methods=["GET"])
@login_required
def get_user(user_id: int):
    ensure_owner_or_admin(user_id)
    user = get_services().users.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return jsonify(user)


@bp.route("/username/<username>", methods=["GET"])
@admin_required
def get_user_by_username(username: str):
    user = get_services().users.get_user_by_username(username)
    if user is None:
        raise NotFoundError(f"User {username} not found")
    return jsonify(user)


@bp.route("/email/<email>", methods=["GET"])
@admin_required
def get_user_by_email(email: str):
    user = get_services().users.get_user_by_email(email)
    if user is None:
        raise NotFoundError(f"User with email {email} not found")
    return jsonify(user)


@bp.route("", methods=["POST"])
def create_user():
    dto = CreateUserRequest.from_dict(get_json_body())
    if dto.role and not (current_user.is_authenticated and current_user.is_admin):
        raise AuthorizationError("Only administrators may assign roles")
    return jsonify(get_services().users.create_user(dto)), 201


@bp.route("/<int:user_id>", methods=["PUT"])
@login_required
def update_user(user_id: int):
    ensure_owner_or_admin(user_id)
    dto = UpdateUserRequest.from_dict(get_json_body())
    if not current_user.is_admin and any(getattr(dto, name) is not None for name in ADMIN_ONLY_FIELDS):
        raise AuthorizationError("Only administrators may change role or status")
    user = get_services().users.update_user(user_id, dto)
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return jsonify(user)


@bp.route("/<int:user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id: int):
    if not get_services().users.delete_user(user_id):
        raise NotFoundError(f"User with ID {user_id} not found")
    return "", 204


@bp.route("/<int:user_id>/change-password", methods=["PUT"])
@login_required
def change_password(user_id: int):
    ensure_owner_or_admin(user_id)
    services = get_services()
    if services.users.get_user(user_id) is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    if not services.users.change_password(user_id, ChangePasswordRequest.from_dict(get_json_body())):
        raise BadRequestError("Current password is incorrect")
    return "", 204
