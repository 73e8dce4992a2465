"""Application errors mapped to HTTP status codes."""


class AppException(Exception):
    """Base application exception; subclasses fix the status code."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    status_code = 404
    default_message = "Resource not found"


class UnauthorizedException(AppException):
    status_code = 401
    default_message = "Invalid credentials"


class ForbiddenException(AppException):
    status_code = 403
    default_message = "Forbidden"


class ConflictException(AppException):
    status_code = 409
    default_message = "Conflict"


class ValidationException(AppException):
    status_code = 422
    default_message = "Validation error"
