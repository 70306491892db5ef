"""
errors.py — Domain exceptions and the user-facing failure messages.
Absence on a read is not an error: services return None / [] for that.
"""

from config import APP_ENV


class FixItError(Exception):
    """Base class for every error raised by the services layer."""


class NotFoundError(FixItError):
    """A record the operation depends on does not exist for this user."""


class ConflictError(FixItError):
    """A uniqueness rule or an optimistic version check rejected the write."""


class ValidationError(FixItError):
    """Input is outside what the operation accepts."""


class WriteFailure(FixItError):
    """The database rejected or failed a write."""


class ErrorMessages:
    GENERIC = "Something went wrong. Please try again."
    NOT_FOUND = "The requested record was not found."
    CONFLICT = "This was changed somewhere else. Refresh and try again."
    INVALID = "Some of the submitted data is not valid."
    AUTH_MISSING = "Missing or invalid Authorization header"
    AUTH_INVALID = "Invalid or expired token"


STATUS_CODES = {
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 400,
    WriteFailure: 500,
}


def status_for(exc: Exception) -> int:
    for cls, code in STATUS_CODES.items():
        if isinstance(exc, cls):
            return code
    return 500


PUBLIC_MESSAGES = {
    404: ErrorMessages.NOT_FOUND,
    409: ErrorMessages.CONFLICT,
    400: ErrorMessages.INVALID,
}


def public_detail(exc: Exception) -> str:
    """In production only the fixed ErrorMessages text reaches the client."""
    if APP_ENV == "production":
        return PUBLIC_MESSAGES.get(status_for(exc), ErrorMessages.GENERIC)
    return str(exc) or ErrorMessages.GENERIC
