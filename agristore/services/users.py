from typing import Dict, Optional

import bcrypt

from agristore.database.defaults import CUSTOMER_ROLE, hash_password
from agristore.models import mapping
from agristore.models.dtos import (
    ChangePasswordRequest,
    CreateUserRequest,
    PagedResult,
    UpdateUserRequest,
    UserDto,
    UserFilterParams,
)
from agristore.models.entities import User
from agristore.models.validation import (
    ensure_valid,
    validate_change_password,
    validate_create_user,
    validate_update_user,
)
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import DuplicateError, NotFoundError
from agristore.utils.logging import get_logger

log = get_logger(__name__)


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class UserService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def _role_names(self) -> Dict[int, str]:
        return {role.id: role.name for role in self.uow.roles.find()}

    def _to_dto(self, user: User, roles: Optional[Dict[int, str]] = None) -> UserDto:
        roles = roles if roles is not None else self._role_names()
        return mapping.user_to_dto(user, roles.get(user.role_id))

    def _role_id(self, name: str) -> int:
        role = self.uow.roles.get_by_name(name)
        if role is None:
            raise NotFoundError(f"Role {name} not found")
        return role.id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_users(self, params: UserFilterParams) -> PagedResult:
        users, total = self.uow.users.filter(
            search=params.search,
            role=params.role,
            is_active=params.is_active,
            sort_by=params.sort_by,
            sort_desc=params.sort_desc,
            page_number=params.page_number,
            page_size=params.page_size,
        )
        roles = self._role_names()
        return mapping.paged([self._to_dto(u, roles) for u in users], total, params)

    def get_user(self, user_id: int) -> Optional[UserDto]:
        user = self.uow.users.get_by_id(user_id)
        return self._to_dto(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[UserDto]:
        user = self.uow.users.get_by_username(username)
        return self._to_dto(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserDto]:
        user = self.uow.users.get_by_email(email)
        return self._to_dto(user) if user else None

    def username_exists(self, username: str) -> bool:
        return self.uow.users.username_exists(username)

    def email_exists(self, email: str) -> bool:
        return self.uow.users.email_exists(email)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_user(self, dto: CreateUserRequest) -> UserDto:
        ensure_valid(validate_create_user(dto))
        if self.username_exists(dto.username):
            raise DuplicateError("Username already exists")
        if dto.email and self.email_exists(dto.email):
            raise DuplicateError("Email already exists")
        user = self.uow.users.add(User(
            full_name=dto.full_name,
            username=dto.username,
            password_hash=hash_password(dto.password),
            email=dto.email or None,
            phone=dto.phone or None,
            address=dto.address or None,
            role_id=self._role_id(dto.role or CUSTOMER_ROLE),
        ))
        log.info("User %s created (id=%s)", user.username, user.id)
        return self._to_dto(user)

    def update_user(self, user_id: int, dto: UpdateUserRequest) -> Optional[UserDto]:
        ensure_valid(validate_update_user(dto))
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            return None
        if dto.email and dto.email != user.email:
            if self.email_exists(dto.email):
                raise DuplicateError("Email already exists")
            user.email = dto.email
        if dto.full_name is not None:
            user.full_name = dto.full_name
        if "phone" in dto.provided:
            user.phone = dto.phone or None
        if "address" in dto.provided:
            user.address = dto.address or None
        if dto.role is not None:
            user.role_id = self._role_id(dto.role)
        if dto.is_active is not None:
            user.is_active = dto.is_active
        self.uow.users.update(user, "full_name", "email", "phone", "address", "role_id", "is_active")
        return self._to_dto(user)

    def delete_user(self, user_id: int) -> bool:
        """Soft delete: the account is deactivated, history is kept."""
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            return False
        user.is_active = False
        self.uow.users.update(user, "is_active")
        log.info("User %s deactivated", user.username)
        return True

    def change_password(self, user_id: int, dto: ChangePasswordRequest) -> bool:
        ensure_valid(validate_change_password(dto))
        user = self.uow.users.get_by_id(user_id)
        if user is None or not check_password(dto.current_password, user.password_hash):
            log.warning("Password change rejected for user %s", user_id)
            return False
        user.password_hash = hash_password(dto.new_password)
        return self.uow.users.update(user, "password_hash")

    def authenticate(self, username: str, password: str) -> Optional[UserDto]:
        """The active user matching the credentials, if any."""
        user = self.uow.users.get_by_username(username or "")
        if user is None or not user.is_active or not check_password(password or "", user.password_hash):
            return None
        return self._to_dto(user)
