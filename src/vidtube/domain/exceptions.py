"""Error taxonomy for VidTube.

Every failure that should reach a client is an ``ApiError`` subclass. The
HTTP layer renders them as the uniform error envelope
``{statusCode, message, success: false, errors: [...]}``.
"""

from typing import Any


class ApiError(Exception):
    """Base class for errors rendered to API clients.

    Attributes:
        status_code: HTTP status code used in the envelope and response.
        message: Human-readable error message.
        errors: Optional list of structured error details.
    """

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(ApiError):
    """Raised when a required field is missing, empty or malformed."""

    status_code = 400
    default_message = "All fields are required"


class InvalidCredentialsError(ApiError):
    """Raised when a password does not match the stored digest."""

    status_code = 401
    default_message = "Invalid user credentials"


class UnauthorizedError(ApiError):
    """Raised for missing, expired, reused or invalid tokens."""

    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(ApiError):
    """Raised when a user or channel does not exist."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    """Raised when a unique username or email is already taken."""

    status_code = 409
    default_message = "Resource already exists"


class ConfigurationError(ApiError):
    """Raised when required configuration (e.g. a signing secret) is missing."""

    status_code = 500
    default_message = "Server configuration error"
