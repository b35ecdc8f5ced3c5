from typing import List, Optional, Tuple

from agristore.models.entities import Role, User

from .base import Repository

USER_SORT_COLUMNS = {
    "username": "u.username",
    "email": "u.email",
    "created_at": "u.created_at",
}


class RoleRepository(Repository[Role]):
    table_name = "role_table"
    entity = Role

    def get_by_name(self, name: str) -> Optional[Role]:
        return self.first(name=name)


class UserRepository(Repository[User]):
    table_name = "user_table"
    entity = User
    non_update = ["id", "created_at"]

    def get_by_username(self, username: str) -> Optional[User]:
        return self.first(username=username)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.first(email=email)

    def username_exists(self, username: str) -> bool:
        return self.exists(username=username)

    def email_exists(self, email: str) -> bool:
        return self.exists(email=email)

    def filter(
        self,
        search: Optional[str],
        role: Optional[str],
        is_active: Optional[bool],
        sort_by: str,
        sort_desc: bool,
        page_number: int,
        page_size: int,
    ) -> Tuple[List[User], int]:
        clauses, params = [], []
        if search:
            term = f"%{search.lower()}%"
            clauses.append("(LOWER(u.username) LIKE ? OR LOWER(u.full_name) LIKE ? OR LOWER(u.email) LIKE ?)")
            params += [term, term, term]
        if role:
            clauses.append("r.name = ?")
            params.append(role)
        if is_active is not None:
            clauses.append("u.is_active = ?")
            params.append(is_active)
        column = USER_SORT_COLUMNS.get(sort_by, "u.created_at")
        direction = "DESC" if sort_desc else "ASC"
        return self.page(
            " AND ".join(clauses),
            params,
            f"{column} {direction}, u.id {direction}",
            page_number,
            page_size,
            select="u.*",
            from_clause="user_table AS u JOIN role_table AS r ON r.id = u.role_id",
        )
