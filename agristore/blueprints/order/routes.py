from flask import jsonify, request
from flask_login import login_required

from . import bp
from agristore.models.dtos import CreateOrderRequest, OrderFilterParams, PaginationParams, UpdateOrderStatusRequest
from agristore.models.entities import ORDER_STATUSES, utcnow
from agristore.services import get_services
from agristore.utils.auth import admin_required, ensure_owner_or_admin
from agristore.utils.exceptions import BadRequestError, NotFoundError
from agristore.utils.helpers import get_json_body, query_date, query_datetime


@bp.route("", methods=["GET"])
@admin_required
def list_orders():
    return jsonify(get_services().orders.get_orders(OrderFilterParams.from_query(request.args)))


@bp.route("/<int:order_id>", methods=["GET"])
@login_required
def get_order(order_id: int):
    order = get_services().orders.get_order(order_id)
    if order is None:
        raise NotFoundError(f"Order with ID {order_id} not found")
    ensure_owner_or_admin(order.user_id)
    return jsonify(order)


@bp.route("/user/<int:user_id>", methods=["GET"])
@login_required
def orders_by_user(user_id: int):
    ensure_owner_or_admin(user_id)
    params = PaginationParams.from_query(request.args)
    return jsonify(get_services().orders.get_orders_by_user(user_id, params))


@bp.route("/user/<int:user_id>", methods=["POST"])
@login_required
def create_order(user_id: int):
    ensure_owner_or_admin(user_id)
    order = get_services().orders.create_order(user_id, CreateOrderRequest.from_dict(get_json_body()))
    return jsonify(order), 201


@bp.route("/status/<status>", methods=["GET"])
@admin_required
def orders_by_status(status: str):
    if status not in ORDER_STATUSES:
        raise BadRequestError(f"Unknown order status: {status}")
    return jsonify(get_services().orders.get_orders_by_status(status))


@bp.route("/<int:order_id>/status", methods=["PUT"])
@admin_required
def update_status(order_id: int):
    dto = UpdateOrderStatusRequest.from_dict(get_json_body())
    if not get_services().orders.update_order_status(order_id, dto):
        raise NotFoundError(f"Order with ID {order_id} not found")
    return "", 204


@bp.route("/<int:order_id>/cancel", methods=["PUT"])
@login_required
def cancel_order(order_id: int):
    services = get_services()
    order = services.orders.get_order(order_id)
    if order is not None:
        ensure_owner_or_admin(order.user_id)
    if order is None or not services.orders.cancel_order(order_id):
        raise NotFoundError(f"Order with ID {order_id} not found or cannot be cancelled")
    return "", 204


@bp.route("/revenue", methods=["GET"])
@admin_required
def revenue():
    from_date = query_datetime("from_date")
    to_date = query_datetime("to_date")
    total = get_services().orders.get_total_revenue(from_date, to_date)
    return jsonify({"revenue": total, "from_date": from_date, "to_date": to_date})


@bp.route("/statistics/daily", methods=["GET"])
@admin_required
def daily_statistics():
    day = query_date("date") or utcnow().date()
    return jsonify(get_services().orders.get_daily_statistics(day))
