from typing import Optional

from flask import Request
from flask_login import LoginManager

from agristore.utils.auth import TokenUser, decode_token
from agristore.utils.exceptions import AuthenticationError
from agristore.utils.logging import get_logger

logger = get_logger(__name__)

login_manager = LoginManager()


@login_manager.request_loader
def load_user_from_request(req: Request):
    """Resolve the caller from an ``Authorization: Bearer <jwt>`` header."""
    header: Optional[str] = req.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    claims = decode_token(token.strip())
    if claims is None:
        return None
    return TokenUser.from_claims(claims)


@login_manager.unauthorized_handler
def unauthorized():
    logger.info("Rejected unauthenticated request")
    raise AuthenticationError()
