"""
Domain errors raised by the CRUD layer.

Each error carries the HTTP status it maps to; main.py registers a single
exception handler that turns any AppError into a JSON response.
"""


class AppError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or disallowed input (unknown filter, empty update, bad range)."""

    status_code = 400


class DuplicateError(AppError):
    """Natural-key collision on create."""

    status_code = 400


class NotFoundError(AppError):
    """Key does not resolve to any row."""

    status_code = 404


class UnauthorizedError(AppError):
    """Bad username/password."""

    status_code = 401
