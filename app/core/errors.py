"""Error taxonomy shared by services and the HTTP layer.

Every error carries a human-readable message and the HTTP status it maps to.
The exception handlers in app.main render them as {"error": message}.
"""


class AppError(Exception):
    """Base class for expected, client-visible failures."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Malformed input (e.g. non-numeric id, missing required field)."""

    status_code = 400


class UnauthorizedError(AppError):
    """Missing, invalid or expired token; bad credentials."""

    status_code = 401


class ForbiddenError(AppError):
    """Authenticated but not allowed: wrong role, banned or suspended account."""

    status_code = 403


class NotFoundError(AppError):
    """No matching row."""

    status_code = 404


class ConflictError(AppError):
    """Unique constraint violated (e.g. email already registered)."""

    status_code = 409


class InternalError(AppError):
    """Database or unexpected failure; message is generic, detail is logged."""

    status_code = 500
