"""
Error taxonomy shared by repositories, services and routes.

Internal operations return these as ``Err`` values; the API boundary
raises them once through ``unwrap`` and ``main`` maps each class to an
HTTP status code.
"""


class CardFlasherError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str, issues: list | None = None):
        super().__init__(message)
        self.message = message
        self.issues = issues


class ValidationError(CardFlasherError):
    """Malformed or out-of-range input."""

    status_code = 400


class UnauthorizedError(CardFlasherError):
    """Missing, invalid or expired session."""

    status_code = 401


class NotFoundError(CardFlasherError):
    """Entity is absent or belongs to another user."""

    status_code = 404


class ConflictError(CardFlasherError):
    """Duplicate entry, e.g. an already registered email."""

    status_code = 409


class UpstreamError(CardFlasherError):
    """The content generation service failed."""

    status_code = 500


class SchemaViolation(UpstreamError):
    """The generation service answered with text that does not match the expected JSON shape."""


class DatabaseNotConfiguredError(CardFlasherError):
    status_code = 503
