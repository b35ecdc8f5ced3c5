from flask import jsonify, request
from flask_login import login_required

from . import bp
from agristore.models.dtos import CreateReviewRequest, PaginationParams, ReviewFilterParams, UpdateReviewRequest
from agristore.services import get_services
from agristore.utils.auth import ensure_owner_or_admin
from agristore.utils.exceptions import NotFoundError
from agristore.utils.helpers import get_json_body


def _ensure_review_owner(review_id: int) -> None:
    owner_id = get_services().reviews.get_owner_id(review_id)
    if owner_id is None:
        raise NotFoundError(f"Review with ID {review_id} not found")
    ensure_owner_or_admin(owner_id)


@bp.route("", methods=["GET"])
def list_reviews():
    return jsonify(get_services().reviews.get_reviews(ReviewFilterParams.from_query(request.args)))


@bp.route("/<int:review_id>", methods=["GET"])
def get_review(review_id: int):
    review = get_services().reviews.get_review(review_id)
    if review is None:
        raise NotFoundError(f"Review with ID {review_id} not found")
    return jsonify(review)


@bp.route("/user/<int:user_id>", methods=["GET"])
def reviews_by_user(user_id: int):
    params = PaginationParams.from_query(request.args)
    return jsonify(get_services().reviews.get_reviews_by_user(user_id, params))


@bp.route("/product/<int:product_id>", methods=["GET"])
def reviews_by_product(product_id: int):
    params = PaginationParams.from_query(request.args)
    return jsonify(get_services().reviews.get_reviews_by_product(product_id, params))


@bp.route("/product/<int:product_id>/average-rating", methods=["GET"])
def average_rating(product_id: int):
    return jsonify({"product_id": product_id, "average_rating": get_services().reviews.get_average_rating(product_id)})


@bp.route("/product/<int:product_id>/summary", methods=["GET"])
def review_summary(product_id: int):
    return jsonify(get_services().reviews.get_product_review_summary(product_id))


@bp.route("/create/<int:user_id>", methods=["POST"])
@login_required
def create_review(user_id: int):
    ensure_owner_or_admin(user_id)
    review = get_services().reviews.create_review(user_id, CreateReviewRequest.from_dict(get_json_body()))
    return jsonify(review), 201


@bp.route("/update/<int:review_id>", methods=["PUT"])
@login_required
def update_review(review_id: int):
    _ensure_review_owner(review_id)
    get_services().reviews.update_review(review_id, UpdateReviewRequest.from_dict(get_json_body()))
    return "", 204


@bp.route("/delete/<int:review_id>", methods=["DELETE"])
@login_required
def delete_review(review_id: int):
    _ensure_review_owner(review_id)
    get_services().reviews.delete_review(review_id)
    return "", 204


@bp.route("/can-review/<int:user_id>/<int:product_id>", methods=["GET"])
def can_review(user_id: int, product_id: int):
    return jsonify({"can_review": get_services().reviews.can_user_review(user_id, product_id)})
