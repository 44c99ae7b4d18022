"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to JSON ``{"message": ...}`` responses by the exception handlers.
"""

from collections.abc import Mapping, Sequence

from staffdesk.core.constants import THROTTLED_MESSAGE


def summarize_errors(errors: Mapping[str, Sequence[str]]) -> str:
    """Build the top-level message for a set of field errors.

    The first message is used verbatim and the remainder is counted, e.g.
    ``"The name field is required. (and 2 more errors)"``.
    """
    messages = [message for field_messages in errors.values() for message in field_messages]
    if not messages:
        return ValidationError.message
    remaining = len(messages) - 1
    if remaining == 0:
        return messages[0]
    noun = "error" if remaining == 1 else "errors"
    return f"{messages[0]} (and {remaining} more {noun})"


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code used in logs
        status_code: HTTP status code for the response
        errors: Per-field messages, rendered under ``errors`` when present
        headers: Extra response headers (e.g. ``Retry-After``)
    """

    message: str = "Server Error."
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.errors = errors or {}
        self.headers = headers or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError(resource="role", resource_id=role_id)
    """

    message = "Resource not found."
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: int | str | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(message=message)


class ValidationError(AppException):
    """Raised when request data fails validation.

    Example:
        raise ValidationError(errors={"slug": ["The slug has already been taken."]})
    """

    message = "The given data was invalid."
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        errors = errors or {}
        super().__init__(message=message or summarize_errors(errors), errors=errors)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Shortcut for a single failing field."""
        return cls(errors={field: [message]})


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid.

    Example:
        raise UnauthorizedError()
    """

    message = "Unauthenticated."
    error_code = "unauthenticated"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when the current user may not perform an action.

    Example:
        raise ForbiddenError(error_code="role_is_system")
    """

    message = "This action is unauthorized."
    error_code = "forbidden"
    status_code = 403


class RateLimitError(AppException):
    """Raised when a rate limit window is exhausted.

    Example:
        raise RateLimitError(headers={"Retry-After": "42"})
    """

    message = THROTTLED_MESSAGE
    error_code = "rate_limit_exceeded"
    status_code = 429
