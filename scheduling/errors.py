"""
Error types raised by the Scheduling service.

Each error carries a human-readable message and a stable ``code`` that the
GraphQL layer exposes under ``extensions.code``.
"""


class SchedulingError(Exception):
    """Base class for all expected, caller-facing failures."""
    code = "SCHEDULING_ERROR"
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(SchedulingError):
    code = "DUPLICATE_EMAIL"
    default_message = "Email already in use"


class InvalidCredentials(SchedulingError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class NotFound(SchedulingError):
    code = "NOT_FOUND"
    default_message = "Appointment not found"


class InvalidDate(SchedulingError):
    code = "INVALID_DATE"
    default_message = "Invalid date format"


class InvalidRange(SchedulingError):
    code = "INVALID_RANGE"
    default_message = "End time must be after start time"


class ValidationError(SchedulingError):
    code = "VALIDATION_ERROR"
    default_message = "Validation error"


class PersistenceError(SchedulingError):
    code = "PERSISTENCE_ERROR"
    default_message = "Failed to save appointment to database"
