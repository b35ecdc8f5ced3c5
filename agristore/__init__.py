import os
from typing import Any, Mapping, Optional

from flask import Flask
from dotenv import load_dotenv

from .config import config_by_name
from .utils.logging import setup_logging
from .utils.extensions import login_manager
from .utils.helpers import StoreJSONProvider
from .database import DBClient, schema, seed_defaults, setup_db

load_dotenv()


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Application factory.
    Keeps startup side-effects isolated and testable.
    """
    config_name = config_name or os.getenv("FLASK_ENV", "default")
    app = Flask(__name__, instance_relative_config=True)
    app.json_provider_class = StoreJSONProvider
    app.json = StoreJSONProvider(app)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    app.config.from_object(config_by_name[config_name])
    app.config.from_envvar("AGRISTORE_SETTINGS", silent=True)
    if overrides:
        app.config.update(overrides)
    config_by_name[config_name].init_app(app)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    setup_logging(app)

    # ------------------------------------------------------------------
    # Extensions
    # ------------------------------------------------------------------
    login_manager.init_app(app)

    # ------------------------------------------------------------------
    # Database & defaults
    # ------------------------------------------------------------------
    db = DBClient(app)
    setup_db(schema, db)
    created = seed_defaults(db, app.config["ADMIN_PASSWORD"])
    if created:
        app.logger.info("Seeded %d default rows", created)

    with app.app_context():
        from .blueprints import init_blueprints
        init_blueprints(app)
        from .utils.error_handlers import register_error_handlers
        register_error_handlers(app)

        from .services import close_services
        app.teardown_appcontext(close_services)

        app.logger.info("AgriStore %s server ready (database: %s)", config_name, db.backend)

    return app
