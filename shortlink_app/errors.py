"""
Error taxonomy for the shortener core.

Every error the core raises towards a caller is a ServiceError. The API layer
renders them into the response envelope using `code`, `status_code` and
`description`; nothing else about the exception reaches the client.
"""

# Envelope error codes
FIELD_BAD_FORMAT = "FIELD_BADFORMAT"
FIELD_INCORRECT = "FIELD_INCORRECT"
SHORT_ALREADY_EXISTS = "SHORT_ALREADY_EXISTS"
SHORT_NOT_FOUND = "SHORT_NOT_FOUND"
SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

SERVICE_UNAVAILABLE_MESSAGE = "Service is currently unavailable. Please try again later."


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    code: str = SERVICE_UNAVAILABLE
    status_code: int = 500

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class ValidationError(ServiceError):
    """Malformed or missing input (custom alias shape, date/month, analytics field)."""

    code = FIELD_INCORRECT
    status_code = 400

    @classmethod
    def bad_format(cls, description: str) -> "ValidationError":
        """Validation error for request bodies that could not be decoded at all."""
        error = cls(description)
        error.code = FIELD_BAD_FORMAT
        return error


class ConflictError(ServiceError):
    """Custom alias already taken."""

    code = SHORT_ALREADY_EXISTS
    status_code = 409

    def __init__(self, description: str = "Custom alias already exists"):
        super().__init__(description)


class NotFoundError(ServiceError):
    """Unknown or expired alias. Both causes look the same to the caller."""

    code = SHORT_NOT_FOUND
    status_code = 404

    def __init__(self):
        super().__init__("Short link not found")


class TransientStoreError(ServiceError):
    """Store I/O failure. Details go to the log, never to the client."""

    code = SERVICE_UNAVAILABLE
    status_code = 503

    def __init__(self, detail: str = ""):
        super().__init__(SERVICE_UNAVAILABLE_MESSAGE)
        self.detail = detail
