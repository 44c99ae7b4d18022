"""Authentication backend for JWT and password handling.

This module provides core authentication utilities including:
- Password hashing with bcrypt
- JWT access token creation and verification
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from staffdesk.config import settings
from staffdesk.core.auth.schemas import TokenData
from staffdesk.core.constants import ACCESS_TOKEN_JTI_LENGTH, BCRYPT_ROUNDS


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed or foreign hash in storage
        return False


# ============================================================
# JWT Token Utilities
# ============================================================


def create_access_token(
    user_id: int,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        user_id: The user's id
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
        "iat": now,
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),  # Unique token ID
    }

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a JWT token.

    Args:
        token: The JWT token to decode

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        user_id = payload.get("sub")
        exp = payload.get("exp")

        if not user_id or exp is None:
            return None

        return TokenData(
            user_id=int(user_id),
            exp=datetime.fromtimestamp(exp, tz=UTC),
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
        )

    except (JWTError, ValueError):
        return None


def token_lifetime_seconds() -> int:
    """Lifetime of a freshly issued access token, in seconds."""
    return settings.access_token_expire_minutes * 60
