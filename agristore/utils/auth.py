"""
Bearer token helpers.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``username`` and ``role``.
They are issued by the login collaborator; ``issue_token`` is the one place
that knows the claim layout.
"""
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import current_app
from flask_login import UserMixin, current_user, login_required
from jose import JWTError, jwt

from agristore.database.defaults import ADMIN_ROLE
from agristore.utils.exceptions import AuthorizationError
from agristore.utils.logging import get_logger

log = get_logger(__name__)


class TokenUser(UserMixin):
    """The authenticated caller, rebuilt from token claims on every request."""

    def __init__(self, user_id: int, username: str, role: Optional[str]) -> None:
        self.id = user_id
        self.username = username
        self.role = role

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> Optional["TokenUser"]:
        try:
            user_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return cls(user_id, claims.get("username", ""), claims.get("role"))

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def issue_token(user_id: int, username: str, role: Optional[str]) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + current_app.config["JWT_EXPIRES"],
    }
    return jwt.encode(claims, current_app.config["JWT_SECRET_KEY"], algorithm=current_app.config["JWT_ALGORITHM"])


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except JWTError as e:
        log.warning("Rejected bearer token: %s", e)
        return None


def admin_required(func: Callable) -> Callable:
    @wraps(func)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_user.is_admin:
            raise AuthorizationError()
        return func(*args, **kwargs)
    return wrapper


def ensure_owner_or_admin(user_id: Optional[int]) -> None:
    """Per-user resources are open to their owner and to admins."""
    if current_user.is_admin:
        return
    if user_id is None or current_user.id != user_id:
        raise AuthorizationError()
