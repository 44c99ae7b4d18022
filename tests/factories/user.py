"""User factories for tests."""

from uuid import uuid4

from passlib.hash import bcrypt
from polyfactory import Ignore
from polyfactory.factories.pydantic_factory import ModelFactory
from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from staffdesk.core.auth.backend import create_access_token
from staffdesk.modules.users.models import User
from staffdesk.modules.users.schemas import UserCreate


TEST_PASSWORD = "testpassword123"

# Cheap rounds keep the suite fast; verification reads the cost from the hash
TEST_PASSWORD_HASH = bcrypt.using(rounds=4).hash(TEST_PASSWORD)


class UserFactory(SQLAlchemyFactory[User]):
    """Factory for unsaved User rows."""

    __model__ = User

    id = Ignore()
    created_at = Ignore()
    updated_at = Ignore()
    email_verified_at = None

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def name(cls) -> str:
        return f"Test User {uuid4().hex[:4]}"

    @classmethod
    def password_hash(cls) -> str:
        return TEST_PASSWORD_HASH


class UserCreateFactory(ModelFactory[UserCreate]):
    """Factory for user creation payloads."""

    __model__ = UserCreate

    @classmethod
    def email(cls) -> str:
        return f"new-{uuid4().hex[:8]}@example.com"

    @classmethod
    def name(cls) -> str:
        return f"New User {uuid4().hex[:4]}"

    @classmethod
    def password(cls) -> str:
        return TEST_PASSWORD

    @classmethod
    def role_ids(cls) -> list[int]:
        return [1]


def bearer(user: User) -> dict[str, str]:
    """Authorization header carrying a fresh access token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
