"""FastAPI dependencies for authentication.

This module provides FastAPI dependency injection functions for:
- Extracting and validating JWT tokens
- Getting the current authenticated user
"""

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from staffdesk.api.dependencies import DBSession
from staffdesk.core.auth.backend import decode_token
from staffdesk.core.auth.schemas import TokenData
from staffdesk.core.errors import UnauthorizedError


if TYPE_CHECKING:
    from staffdesk.modules.users.models import User


# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_data(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenData:
    """Extract and validate token data from the Authorization header.

    Args:
        credentials: Bearer token credentials from the request

    Returns:
        Decoded token data

    Raises:
        UnauthorizedError: If token is missing or invalid
    """
    if not credentials:
        raise UnauthorizedError(error_code="missing_token")

    token_data = decode_token(credentials.credentials)
    if not token_data:
        raise UnauthorizedError(error_code="invalid_token")

    if token_data.type != "access":
        raise UnauthorizedError(error_code="invalid_token_type")

    return token_data


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    db: DBSession,
) -> "User":
    """Get the currently authenticated user.

    The user is reloaded on every request, so a deleted account stops
    working immediately even though its token has not expired.

    Args:
        token_data: Validated token data
        db: Database session

    Returns:
        The authenticated user

    Raises:
        UnauthorizedError: If the user no longer exists
    """
    from staffdesk.modules.users.repos import UserRepository  # noqa: PLC0415

    user = await UserRepository(db).get_by_id(token_data.user_id)
    if not user:
        raise UnauthorizedError(error_code="user_not_found")

    return user


# Type alias for cleaner dependency injection
# Use Any for User type to avoid circular imports at runtime
CurrentUser = Annotated[Any, Depends(get_current_user)]
