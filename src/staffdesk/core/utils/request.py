"""Request inspection helpers."""

from starlette.requests import Request


def client_ip(request: Request) -> str:
    """Best-effort client address for the request.

    The first ``X-Forwarded-For`` hop wins when present (original client
    behind a proxy); otherwise the peer address is used.

    Args:
        request: HTTP request

    Returns:
        IP address string, or "unknown"
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"
