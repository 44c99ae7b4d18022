"""Authentication context and request id middleware.

This module provides middleware for:
- Exposing the bearer token's subject to rate limiting and logging
- Request tracing with unique IDs
"""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from staffdesk.core.auth.backend import decode_token


logger = structlog.get_logger()


class AuthContextMiddleware(BaseHTTPMiddleware):
    """Middleware that records the token subject on the request.

    A valid bearer token puts ``user_id`` on ``request.state`` and in the log
    context. Nothing is rejected here; ``get_current_user`` still decides
    whether the request is authenticated.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request and inject the subject id.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response from the handler
        """
        request.state.user_id = None

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token_data = decode_token(auth_header.split(" ", 1)[1])

            if token_data and token_data.type == "access":
                request.state.user_id = token_data.user_id
                structlog.contextvars.bind_contextvars(user_id=token_data.user_id)

        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request ID to each request.

    The request ID is added to:
    - request.state.request_id
    - Response header X-Request-ID
    - Structlog context
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request and add request ID.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response with X-Request-ID header
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "user_id")

        response.headers["X-Request-ID"] = request_id
        return response
