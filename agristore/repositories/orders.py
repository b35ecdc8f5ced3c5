from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from agristore.models.entities import DELIVERED, Order, OrderDetail, to_money

from .base import Repository

ORDER_SORT_COLUMNS = {
    "order_date": "order_date",
    "total_amount": "total_amount",
}


def _window(clauses: list, params: list, from_date: Optional[datetime], to_date: Optional[datetime]) -> None:
    if from_date is not None:
        clauses.append("order_date >= ?")
        params.append(from_date)
    if to_date is not None:
        clauses.append("order_date <= ?")
        params.append(to_date)


class OrderRepository(Repository[Order]):
    table_name = "order_table"
    entity = Order
    non_update = ["id", "user_id", "order_date"]

    def filter(
        self,
        status: Optional[str],
        user_id: Optional[int],
        from_date: Optional[datetime],
        to_date: Optional[datetime],
        sort_by: str,
        sort_desc: bool,
        page_number: int,
        page_size: int,
    ) -> Tuple[List[Order], int]:
        clauses, params = [], []
        if status:
            clauses.append("status = ?")
            params.append(status)
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        _window(clauses, params, from_date, to_date)
        column = ORDER_SORT_COLUMNS.get(sort_by, "order_date")
        direction = "DESC" if sort_desc else "ASC"
        return self.page(
            " AND ".join(clauses), params, f"{column} {direction}, id {direction}", page_number, page_size
        )

    def get_by_status(self, status: str) -> List[Order]:
        return self.find(order_by="order_date DESC, id DESC", status=status)

    def get_in_window(self, from_date: Optional[datetime], to_date: Optional[datetime]) -> List[Order]:
        clauses, params = [], []
        _window(clauses, params, from_date, to_date)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return self._rows(f"SELECT * FROM order_table{where} ORDER BY order_date, id", params)

    def total_revenue(self, from_date: Optional[datetime], to_date: Optional[datetime]) -> Decimal:
        clauses, params = ["status = ?"], [DELIVERED]
        _window(clauses, params, from_date, to_date)
        total = self._scalar(
            f"SELECT SUM(total_amount) AS revenue FROM order_table WHERE {' AND '.join(clauses)}", params
        )
        return to_money(total)


class OrderDetailRepository(Repository[OrderDetail]):
    table_name = "order_detail_table"
    entity = OrderDetail
    non_update = ["id", "order_id", "variant_id", "quantity", "unit_price"]

    def get_by_order(self, order_id: int) -> List[OrderDetail]:
        return self.find(order_id=order_id)
