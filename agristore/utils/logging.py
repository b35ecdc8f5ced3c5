"""
Centralized, idempotent logging configuration.
Import anywhere; configures only once per process.
"""
import logging
import logging.handlers
import os
from typing import Optional

from flask import Flask, current_app, has_app_context, has_request_context, request

from agristore.config import DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATEFMT


_configured = False


def setup_logging(app: Optional[Flask] = None) -> None:
    """
    Configure root + Flask app logger.
    Safe to call multiple times (every test builds a new app).
    """
    global _configured

    if app is None:
        if not _configured:
            logging.basicConfig(level=logging.INFO, format=DEFAULT_LOG_FORMAT)
            _configured = True
        return

    if app.debug:
        level = logging.DEBUG
    else:
        level_name = str(app.config.get("LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
        level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not _configured:
        formatter = logging.Formatter(
            app.config.get("LOG_FORMAT", DEFAULT_LOG_FORMAT),
            datefmt=app.config.get("LOG_DATEFMT", DEFAULT_LOG_DATEFMT),
        )
        root.handlers.clear()

        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console.addFilter(UTF8Filter())
        console.addFilter(RequestFilter())
        root.addHandler(console)

        log_file = app.config.get("LOG_FILE")
        if log_file:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            try:
                file_handler = logging.handlers.RotatingFileHandler(
                    log_file,
                    maxBytes=10 * 1024 * 1024,   # 10 MB
                    backupCount=7,
                    encoding="utf-8",
                )
                file_handler.setFormatter(formatter)
                file_handler.addFilter(RequestFilter())
                root.addHandler(file_handler)
                app.logger.info("File logging → %s", log_file)
            except OSError as exc:  # Never crash on logging failure
                app.logger.warning("Failed to initialize file logging (%s): %s", log_file, exc)
        _configured = True

    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)

    app.logger.propagate = False
    app.logger.handlers = root.handlers[:]
    app.logger.setLevel(level)

    app.logger.info("Logging initialized (level=%s)", logging.getLevelName(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Preferred way: logger = get_logger(__name__)
    Hierarchically named, automatically uses app.logger as parent when available.
    """
    if has_app_context() and current_app:
        base = current_app.logger
    else:
        base = logging.getLogger("agristore")

    if not name or name == "__main__":
        return base

    return base.getChild(name.split(".")[-1] if "." in name else name)


class UTF8Filter(logging.Filter):
    """Prevent console crashes on raw bytes passed as log messages."""
    def filter(self, record):
        if isinstance(record.msg, bytes):
            record.msg = record.msg.decode("utf-8", errors="replace")
        return True


class RequestFilter(logging.Filter):
    """Prefix messages logged during a request with the method and path."""
    def filter(self, record):
        if has_request_context() and not getattr(record, "_request_tagged", False):
            record.msg = f"[{request.method} {request.path}] {record.msg}"
            record._request_tagged = True
        return True
