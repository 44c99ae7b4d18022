"""Structured request logging."""

from staffdesk.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
]
