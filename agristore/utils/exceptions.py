# agristore/utils/exceptions.py
"""
Central place for all application-specific exceptions.
Services raise these; the error handlers turn them into JSON envelopes.
"""
from __future__ import annotations


class StoreError(Exception):
    """Base exception for all store errors; raise a subclass."""
    status_code = 500
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, **payload):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.payload = payload


class ValidationError(StoreError):
    status_code = 400
    message = "One or more validation errors occurred"


class BadRequestError(StoreError):
    status_code = 400
    message = "The request could not be processed"


class AuthenticationError(StoreError):
    status_code = 401
    message = "Authentication is required"


class AuthorizationError(StoreError):
    status_code = 403
    message = "You do not have permission to perform this action"


class NotFoundError(StoreError):
    status_code = 404
    message = "The requested resource was not found"


class DuplicateError(StoreError):
    status_code = 409
    message = "The resource already exists"
