"""Application error taxonomy.

Services raise these; the handlers registered in ``backend.main`` turn them
into JSON responses so no route has to know about status codes.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(AppError):
    """Malformed or missing input. Carries field-level detail."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or [{"field": None, "message": self.message}]

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"field": field, "message": message}])

    def to_body(self) -> dict:
        return {"errors": self.errors}


class ConflictError(AppError):
    status_code = 400
    default_message = "Resource already exists"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class UploadError(AppError):
    status_code = 500
    default_message = "Failed to upload image"


class InternalError(AppError):
    status_code = 500
