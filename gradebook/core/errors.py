"""Error taxonomy shared by the services and the HTTP layer.

Every error carries a human readable ``message`` and the HTTP status it is
answered with. Optional keyword payload (for example the offending student
ids of a rejected batch) is merged into the JSON error body.
"""

from typing import Any


class GradebookError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"message": self.message, **self.extra}


class ValidationFailed(GradebookError):
    """Malformed or out-of-range input."""

    status_code = 400


class AuthError(GradebookError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class AccessDenied(GradebookError):
    """Authenticated, but not allowed to touch the target."""

    status_code = 403


class NotFound(GradebookError):
    """The addressed entity does not exist."""

    status_code = 404
