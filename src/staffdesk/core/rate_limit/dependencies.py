"""Named rate limits applied as route dependencies.

Usage:
    router = APIRouter(dependencies=[Depends(get_current_user), Depends(throttle("admin-api"))])
"""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response

from staffdesk.config import settings
from staffdesk.core.constants import ADMIN_API_LIMITER
from staffdesk.core.errors import RateLimitError
from staffdesk.core.rate_limit.backend import Limit, rate_limiter
from staffdesk.core.utils.request import client_ip


logger = structlog.get_logger()

LimitResolver = Callable[[Request], list[Limit]]


def admin_api_limits(request: Request) -> list[Limit]:
    """Per-user and per-address windows for the admin API.

    Unauthenticated callers share the ``guest`` user bucket.
    """
    user_id = getattr(request.state, "user_id", None)
    user_key = user_id if user_id is not None else "guest"
    return [
        Limit(
            key=f"{ADMIN_API_LIMITER}:user:{user_key}",
            max_attempts=settings.admin_api_user_limit,
            window=settings.rate_limit_window,
        ),
        Limit(
            key=f"{ADMIN_API_LIMITER}:ip:{client_ip(request)}",
            max_attempts=settings.admin_api_ip_limit,
            window=settings.rate_limit_window,
        ),
    ]


NAMED_LIMITS: dict[str, LimitResolver] = {
    ADMIN_API_LIMITER: admin_api_limits,
}


def throttle(name: str) -> Callable[[Request, Response], Awaitable[None]]:
    """Build a dependency enforcing the named limiter.

    Args:
        name: Key in ``NAMED_LIMITS``

    Returns:
        Dependency that raises RateLimitError once a window is exhausted

    Raises:
        KeyError: If no limiter is registered under ``name``
    """
    resolve = NAMED_LIMITS[name]

    async def dependency(request: Request, response: Response) -> None:
        result = await rate_limiter.attempt(resolve(request))

        if not result.allowed:
            logger.warning(
                "rate_limit_exceeded",
                limiter=name,
                path=request.url.path,
                retry_after=result.retry_after,
            )
            raise RateLimitError(
                headers={
                    "Retry-After": str(result.retry_after),
                    "X-RateLimit-Limit": str(result.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(result.reset_time),
                }
            )

        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)

    dependency.__name__ = f"throttle_{name.replace('-', '_')}"
    return dependency
