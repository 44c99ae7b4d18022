"""Request logging middleware.

One ``request_started`` and one ``request_completed`` event per request,
carrying the request id and subject set by the outer middlewares.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from staffdesk.core.utils.request import client_ip


logger = structlog.get_logger()

DEFAULT_EXCLUDED_PATHS = (
    "/health/live",
    "/health/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs HTTP requests and their outcome.

    The completion event is logged at ``error`` for 5xx responses,
    ``warning`` for 4xx and ``info`` otherwise.
    """

    def __init__(self, app: Any, exclude_paths: tuple[str, ...] | None = None) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application
            exclude_paths: Path prefixes that are never logged
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or DEFAULT_EXCLUDED_PATHS

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()
        context: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "request_id": getattr(request.state, "request_id", None),
        }

        logger.info(
            "request_started",
            client_ip=client_ip(request),
            query=request.url.query or None,
            **context,
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                duration_ms=_elapsed_ms(start_time),
                **context,
            )
            raise

        completion = {
            **context,
            "status_code": response.status_code,
            "duration_ms": _elapsed_ms(start_time),
            "user_id": getattr(request.state, "user_id", None),
        }

        if response.status_code >= 500:
            logger.error("request_completed", **completion)
        elif response.status_code >= 400:
            logger.warning("request_completed", **completion)
        else:
            logger.info("request_completed", **completion)

        return response


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
