# agristore/utils/error_handlers.py
"""
Centralized Flask error handlers.
Keeps routes.py files clean and guarantees one JSON envelope for every failure.
"""
from datetime import datetime, timezone

from flask import Flask, jsonify, Response
from werkzeug.exceptions import HTTPException

from agristore.database import DBClient
from agristore.utils.logging import get_logger
from agristore.utils.exceptions import StoreError, DuplicateError, BadRequestError

log = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def error_envelope(message: str, status_code: int, **extra) -> tuple[Response, int]:
    body = {
        "success": False,
        "message": message,
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), status_code


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StoreError)
    def handle_store_error(error: StoreError) -> tuple[Response, int]:
        log.warning("%s: %s | payload=%s", type(error).__name__, error.message, error.payload)
        return error_envelope(error.message, error.status_code, errors=error.payload.get("errors"))

    def handle_integrity_error(error: Exception) -> tuple[Response, int]:
        log.warning("Integrity error surfaced to client: %s", error)
        if DBClient.is_duplicate(error):
            return handle_store_error(DuplicateError())
        return handle_store_error(BadRequestError("The request conflicts with existing data"))

    for exc_type in DBClient.IntegrityError:
        app.register_error_handler(exc_type, handle_integrity_error)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> tuple[Response, int]:
        return error_envelope(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception) -> tuple[Response, int]:
        log.exception("Unhandled exception")
        return error_envelope(INTERNAL_ERROR_MESSAGE, 500)

    log.info("Error handlers registered")
