from typing import List, Optional

from agristore.models.entities import CartItem

from .base import Repository


class CartRepository(Repository[CartItem]):
    table_name = "cart_table"
    entity = CartItem
    non_update = ["id", "user_id", "variant_id"]

    def get_by_user(self, user_id: int) -> List[CartItem]:
        return self.find(user_id=user_id)

    def get_line(self, user_id: int, variant_id: int) -> Optional[CartItem]:
        return self.first(user_id=user_id, variant_id=variant_id)

    def clear(self, user_id: int) -> int:
        return self.delete_where(user_id=user_id)

    def quantity_sum(self, user_id: int) -> int:
        total = self._scalar("SELECT SUM(quantity) AS total FROM cart_table WHERE user_id = ?", (user_id,))
        return int(total or 0)
