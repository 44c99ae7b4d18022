"""Test factories for generating test data."""

from tests.factories.access import PermissionFactory, RoleFactory
from tests.factories.user import (
    TEST_PASSWORD,
    TEST_PASSWORD_HASH,
    UserCreateFactory,
    UserFactory,
    bearer,
)


__all__ = [
    "TEST_PASSWORD",
    "TEST_PASSWORD_HASH",
    "PermissionFactory",
    "RoleFactory",
    "UserCreateFactory",
    "UserFactory",
    "bearer",
]
