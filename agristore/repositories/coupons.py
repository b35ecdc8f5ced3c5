from datetime import datetime
from typing import List, Optional

from agristore.models.entities import Coupon

from .base import Repository


class CouponRepository(Repository[Coupon]):
    table_name = "coupon_table"
    entity = Coupon

    def get_by_code(self, code: str) -> Optional[Coupon]:
        return self.first(code=code)

    def is_code_unique(self, code: str, exclude_id: Optional[int] = None) -> bool:
        coupon = self.get_by_code(code)
        return coupon is None or coupon.id == exclude_id

    def get_active(self, now: datetime) -> List[Coupon]:
        return self._rows(
            """
            SELECT * FROM coupon_table
            WHERE is_active = ? AND start_date <= ? AND end_date >= ?
            ORDER BY end_date, id
            """,
            (True, now, now),
        )
