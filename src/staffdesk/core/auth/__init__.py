"""Authentication module for JWT and password handling."""

from staffdesk.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from staffdesk.core.auth.dependencies import CurrentUser, get_current_user
from staffdesk.core.auth.middleware import AuthContextMiddleware, RequestIdMiddleware


__all__ = [
    # Middleware
    "AuthContextMiddleware",
    # Dependencies
    "CurrentUser",
    "RequestIdMiddleware",
    # Token utilities
    "create_access_token",
    "decode_token",
    "get_current_user",
    # Password utilities
    "hash_password",
    "verify_password",
]
