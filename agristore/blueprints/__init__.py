"""
Blueprint registry for the /api resources.

Each resource package creates its ``bp`` and calls ``register_blueprint`` on
import; the app factory then mounts all of them with ``init_blueprints``.
"""
from typing import List, Optional, Tuple

from flask import Blueprint, Flask

from agristore.utils.logging import get_logger

log = get_logger(__name__)

BLUEPRINTS: List[Tuple[Blueprint, Optional[str]]] = []


def register_blueprint(bp: Blueprint, *, url_prefix: Optional[str] = None) -> None:
    if any(existing.name == bp.name for existing, _ in BLUEPRINTS):
        raise ValueError(f"Blueprint {bp.name!r} registered twice")
    BLUEPRINTS.append((bp, url_prefix))


def init_blueprints(app: Flask) -> None:
    for bp, prefix in BLUEPRINTS:
        app.register_blueprint(bp, url_prefix=prefix)
        log.debug("Mounted %s at %s", bp.name, prefix or "/")
    log.info("%d API blueprints mounted", len(BLUEPRINTS))


from . import address, auth, cart, category, coupon, main, order, product, review, user, variant  # noqa: E402,F401
