from typing import Dict, List, Optional, Tuple

from agristore.models.entities import Review

from .base import Repository

REVIEW_SORT_COLUMNS = {
    "created_at": "created_at",
    "rating": "rating",
}


class ReviewRepository(Repository[Review]):
    table_name = "review_table"
    entity = Review
    non_update = ["id", "user_id", "product_id", "created_at"]

    def get_by_user_and_product(self, user_id: int, product_id: int) -> Optional[Review]:
        return self.first(user_id=user_id, product_id=product_id)

    def has_reviewed(self, user_id: int, product_id: int) -> bool:
        return self.exists(user_id=user_id, product_id=product_id)

    def filter(
        self,
        product_id: Optional[int],
        user_id: Optional[int],
        min_rating: Optional[int],
        max_rating: Optional[int],
        sort_by: str,
        sort_desc: bool,
        page_number: int,
        page_size: int,
    ) -> Tuple[List[Review], int]:
        clauses, params = [], []
        if product_id is not None:
            clauses.append("product_id = ?")
            params.append(product_id)
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if min_rating is not None:
            clauses.append("rating >= ?")
            params.append(min_rating)
        if max_rating is not None:
            clauses.append("rating <= ?")
            params.append(max_rating)
        column = REVIEW_SORT_COLUMNS.get(sort_by, "created_at")
        direction = "DESC" if sort_desc else "ASC"
        return self.page(
            " AND ".join(clauses), params, f"{column} {direction}, id {direction}", page_number, page_size
        )

    def rating_counts(self, product_id: int) -> Dict[int, int]:
        rows = self.uow.execute(
            "SELECT rating, COUNT(*) AS total FROM review_table WHERE product_id = ? GROUP BY rating",
            (product_id,),
        )
        return {int(row["rating"]): int(row["total"]) for row in rows}
