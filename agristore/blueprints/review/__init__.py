from flask import Blueprint
from agristore.blueprints import register_blueprint

bp = Blueprint("review", __name__)

from . import routes  # noqa: E402,F401

register_blueprint(bp, url_prefix="/api/review")
