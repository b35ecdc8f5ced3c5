from flask import current_app, jsonify

from . import bp
from agristore.services import get_services
from agristore.utils.auth import issue_token
from agristore.utils.exceptions import AuthenticationError
from agristore.utils.helpers import get_json_body
from agristore.utils.logging import get_logger

log = get_logger(__name__)


@bp.route("/login", methods=["POST"])
def login():
    data = get_json_body()
    user = get_services().users.authenticate(data.get("username"), data.get("password"))
    if user is None:
        log.warning("Failed login for %r", data.get("username"))
        raise AuthenticationError("Invalid username or password")
    expires = current_app.config["JWT_EXPIRES"]
    return jsonify({
        "access_token": issue_token(user.id, user.username, user.role),
        "token_type": "bearer",
        "expires_in": int(expires.total_seconds()),
        "user": user,
    })
