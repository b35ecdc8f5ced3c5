from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import (
    CreateReviewRequest,
    PagedResult,
    PaginationParams,
    ProductReviewSummaryDto,
    ReviewDto,
    ReviewFilterParams,
    UpdateReviewRequest,
)
from agristore.models.entities import Review
from agristore.models.validation import (
    ensure_valid,
    validate_create_review,
    validate_review_filter,
    validate_update_review,
)
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import BadRequestError, NotFoundError
from agristore.utils.logging import get_logger

log = get_logger(__name__)

ALREADY_REVIEWED_MESSAGE = "You have already reviewed this product"


class ReviewService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def _to_dtos(self, reviews: List[Review]) -> List[ReviewDto]:
        users = {uid: self.uow.users.get_by_id(uid) for uid in {r.user_id for r in reviews}}
        products = {pid: self.uow.products.get_by_id(pid) for pid in {r.product_id for r in reviews}}
        return [
            mapping.review_to_dto(
                r,
                users[r.user_id].username if users.get(r.user_id) else None,
                products[r.product_id].name if products.get(r.product_id) else None,
            )
            for r in reviews
        ]

    def get_reviews(self, params: ReviewFilterParams) -> PagedResult:
        ensure_valid(validate_review_filter(params))
        reviews, total = self.uow.reviews.filter(
            product_id=params.product_id,
            user_id=params.user_id,
            min_rating=params.min_rating,
            max_rating=params.max_rating,
            sort_by=params.sort_by,
            sort_desc=params.sort_desc,
            page_number=params.page_number,
            page_size=params.page_size,
        )
        return mapping.paged(self._to_dtos(reviews), total, params)

    def get_review(self, review_id: int) -> Optional[ReviewDto]:
        review = self.uow.reviews.get_by_id(review_id)
        return self._to_dtos([review])[0] if review else None

    def get_reviews_by_product(self, product_id: int, params: PaginationParams) -> PagedResult:
        return self.get_reviews(ReviewFilterParams(
            page_number=params.page_number, page_size=params.page_size, product_id=product_id
        ))

    def get_reviews_by_user(self, user_id: int, params: PaginationParams) -> PagedResult:
        return self.get_reviews(ReviewFilterParams(
            page_number=params.page_number, page_size=params.page_size, user_id=user_id
        ))

    def get_average_rating(self, product_id: int) -> float:
        counts = self.uow.reviews.rating_counts(product_id)
        total = sum(counts.values())
        if not total:
            return 0.0
        return round(sum(rating * n for rating, n in counts.items()) / total, 2)

    def get_product_review_summary(self, product_id: int) -> ProductReviewSummaryDto:
        counts = self.uow.reviews.rating_counts(product_id)
        return ProductReviewSummaryDto(
            product_id=product_id,
            total_reviews=sum(counts.values()),
            average_rating=self.get_average_rating(product_id),
            rating_counts={star: counts.get(star, 0) for star in range(5, 0, -1)},
        )

    def can_user_review(self, user_id: int, product_id: int) -> bool:
        return not self.uow.reviews.has_reviewed(user_id, product_id)

    def create_review(self, user_id: int, dto: CreateReviewRequest) -> ReviewDto:
        ensure_valid(validate_create_review(dto))
        if self.uow.products.get_by_id(dto.product_id) is None:
            raise NotFoundError(f"Product with ID {dto.product_id} not found")
        if self.uow.reviews.has_reviewed(user_id, dto.product_id):
            raise BadRequestError(ALREADY_REVIEWED_MESSAGE)
        review = self.uow.reviews.add(Review(
            user_id=user_id, product_id=dto.product_id, rating=dto.rating, comment=dto.comment,
        ))
        log.info("User %s reviewed product %s (%s stars)", user_id, dto.product_id, dto.rating)
        return self._to_dtos([review])[0]

    def update_review(self, review_id: int, dto: UpdateReviewRequest) -> bool:
        ensure_valid(validate_update_review(dto))
        review = self.uow.reviews.get_by_id(review_id)
        if review is None:
            return False
        if dto.rating is not None:
            review.rating = dto.rating
        if "comment" in dto.provided:
            review.comment = dto.comment
        return self.uow.reviews.update(review, "rating", "comment")

    def delete_review(self, review_id: int) -> bool:
        review = self.uow.reviews.get_by_id(review_id)
        if review is None:
            return False
        return self.uow.reviews.delete(review)

    def get_owner_id(self, review_id: int) -> Optional[int]:
        review = self.uow.reviews.get_by_id(review_id)
        return review.user_id if review else None
