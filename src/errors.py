"""Application error taxonomy.

Every error carries the HTTP status it maps to and a machine-readable code.
Handlers in ``src.main`` render them as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class FieldError:
    """One invalid or missing field in a submission."""

    field: str
    message: str
    value: Any = None

    def as_dict(self) -> dict:
        data = {"field": self.field, "message": self.message}
        if self.value is not None:
            data["value"] = self.value
        return data


class AppError(Exception):
    status_code = 500
    error = "internal_error"
    default_message = "A server error has occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class ValidationError(AppError):
    """Client-attributable input problem. Lists every offending field."""

    status_code = 400
    error = "validation_error"
    default_message = "Validation failed"

    def __init__(self, fields: list[FieldError], message: Optional[str] = None):
        self.fields = list(fields)
        super().__init__(message)

    @property
    def field_names(self) -> list[str]:
        return [f.field for f in self.fields]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = [f.as_dict() for f in self.fields]
        return data


class AuthenticationError(AppError):
    status_code = 401
    error = "not_authenticated"
    default_message = "Not authenticated"


class AuthorizationError(AppError):
    status_code = 403
    error = "not_authorized"
    default_message = "Admin access required"


class NotFoundError(AppError):
    status_code = 404
    error = "not_found"
    default_message = "Resource not found"


class PersistenceError(AppError):
    """The store could not complete the operation; nothing was written."""

    status_code = 500
    error = "database_error"
    default_message = "There was an error saving your request to our database"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.details = details
        super().__init__(message)
