"""
Settings for each environment.

Everything is read from the process environment (and ``.env`` next to the
project root) once at import; ``create_app`` picks a class from
``config_by_name`` and may layer a settings file and test overrides on top.
"""
import os
from datetime import timedelta
from pathlib import Path
from typing import Type

from dotenv import load_dotenv
from flask import Flask

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(name)-20s | %(levelname)-8s | %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

MIN_SECRET_LENGTH = 32


def _int_env(name: str, default: int) -> int:
    return int(os.getenv(name, default))


class Config:
    """Shared settings; pick one of the subclasses below."""
    SECRET_KEY: str = os.getenv("APP_SECRET", "")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    LOG_FORMAT = os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT)
    LOG_DATEFMT = os.getenv("LOG_DATEFMT", DEFAULT_LOG_DATEFMT)
    LOG_FILE = os.getenv("LOG_FILE")

    # Storage: sqlite:///path, postgresql://... or mysql://...
    DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'instance' / 'agristore.db'}")

    # Bearer tokens
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRES = timedelta(minutes=_int_env("JWT_EXPIRES_MINUTES", 60))

    # Seeded "admin" account
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "agristore-admin")

    # Catalog defaults for routes called without an explicit value
    LOW_STOCK_THRESHOLD = _int_env("LOW_STOCK_THRESHOLD", 10)
    FEATURED_PRODUCT_COUNT = _int_env("FEATURED_PRODUCT_COUNT", 10)

    HOST = "127.0.0.1"
    PORT = _int_env("PORT", 5000)

    @staticmethod
    def init_app(app: Flask) -> None:
        pass


class DevelopmentConfig(Config):
    DEBUG = True
    HOST = "0.0.0.0"

    @staticmethod
    def init_app(app: Flask) -> None:
        print("→ Development mode active")
        if not app.config.get("JWT_SECRET_KEY"):
            app.config["JWT_SECRET_KEY"] = "dev-only-jwt-secret"
        if len(app.secret_key or "") < MIN_SECRET_LENGTH:  # type: ignore
            print(
                "\033[93mWARNING: APP_SECRET is weak or missing. "
                "Generate one with: python -c 'import secrets; print(secrets.token_hex(32))'\033[0m"
            )


class ProductionConfig(Config):
    HOST = "0.0.0.0"

    @staticmethod
    def init_app(app: Flask) -> None:
        for key in ("SECRET_KEY", "JWT_SECRET_KEY"):
            if len(app.config.get(key) or "") < MIN_SECRET_LENGTH:
                raise ValueError(
                    f"{key} must be a strong {MIN_SECRET_LENGTH}+ byte value in production. "
                    "Set it in .env or environment variables."
                )


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret-key"
    JWT_SECRET_KEY = "testing-jwt-secret-key-with-enough-length"
    DATABASE_URI = "sqlite:///:memory:"
    ADMIN_PASSWORD = "admin-password"


config_by_name: dict[str, Type[Config]] = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
