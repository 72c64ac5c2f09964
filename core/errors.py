"""Error taxonomy shared by services and the HTTP layer.

Services raise these; api.errors maps each one to a JSON response of the
form {"success": false, "message": ...}. Messages are safe to show to the
caller and never carry raw store errors.
"""

from typing import Any


class AppError(Exception):
    """Base class for failures that map to an HTTP status."""

    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationFailed(AppError):
    """Field-level input violations, in a stable order."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        errors: list[tuple[str, str]],
        message: str | None = None,
    ):
        super().__init__(message)
        self.errors = list(errors)

    @property
    def fields(self) -> list[str]:
        return [name for name, _ in self.errors]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [
            {"field": name, "message": message} for name, message in self.errors
        ]
        return data


class NotFound(AppError):
    """Entity absent, or owned by someone else. Deliberately indistinguishable."""

    status_code = 404
    default_message = "Resource not found"


class ConstraintViolation(AppError):
    """Unique or foreign-key violation reported by the store."""

    status_code = 400
    default_message = "Duplicate field value entered"

    def __init__(self, message: str | None = None, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authorized to access this route"


class Unexpected(AppError):
    status_code = 500
    default_message = "Server Error"
