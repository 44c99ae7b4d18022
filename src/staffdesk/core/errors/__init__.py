"""Error handling module with JSON message envelopes."""

from staffdesk.core.errors.exceptions import (
    AppException,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
    summarize_errors,
)
from staffdesk.core.errors.handlers import (
    ErrorEnvelope,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    # Handlers
    "ErrorEnvelope",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
    "summarize_errors",
]
