"""Authentication service for login and token issuance."""

from typing import Annotated

from fastapi import Depends

from staffdesk.api.dependencies import DBSession
from staffdesk.core.auth.backend import (
    create_access_token,
    token_lifetime_seconds,
    verify_password,
)
from staffdesk.core.auth.schemas import AccessToken
from staffdesk.core.errors import UnauthorizedError
from staffdesk.modules.users.models import User
from staffdesk.modules.users.repos import UserRepository


INVALID_CREDENTIALS = "These credentials do not match our records."


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)

    async def login(self, email: str, password: str) -> tuple[User, AccessToken]:
        """Authenticate a user with email and password.

        Args:
            email: User's email address (any case)
            password: Plain text password

        Returns:
            Tuple of (user, access_token)

        Raises:
            UnauthorizedError: If credentials are invalid
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError(
                INVALID_CREDENTIALS,
                error_code="invalid_credentials",
            )

        token = AccessToken(
            access_token=create_access_token(user.id),
            expires_in=token_lifetime_seconds(),
        )
        return user, token


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
