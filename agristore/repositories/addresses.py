from typing import List, Optional

from agristore.models.entities import UserAddress

from .base import Repository


class AddressRepository(Repository[UserAddress]):
    table_name = "address_table"
    entity = UserAddress
    non_update = ["id", "user_id"]

    def get_by_user(self, user_id: int) -> List[UserAddress]:
        return self.find(user_id=user_id)

    def get_default(self, user_id: int) -> Optional[UserAddress]:
        return self.first(user_id=user_id, is_default=True)
