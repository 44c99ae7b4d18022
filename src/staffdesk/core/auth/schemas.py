"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Attributes:
        user_id: The user's id (``sub`` claim)
        exp: Token expiration time
        type: Token type
        jti: Unique token id
    """

    user_id: int
    exp: datetime
    type: str = "access"
    jti: str | None = None


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    email: EmailStr
    password: str


class AccessToken(BaseModel):
    """An issued access token.

    Attributes:
        access_token: JWT for API access
        token_type: Always "bearer"
        expires_in: Expiration in seconds
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int
