"""Database layer - session management, base models, and mixins."""

from staffdesk.core.database.base import Base, IntegerIdMixin, TimestampMixin
from staffdesk.core.database.session import (
    async_engine,
    async_session_factory,
    build_engine,
    build_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "IntegerIdMixin",
    "TimestampMixin",
    "async_engine",
    "async_session_factory",
    "build_engine",
    "build_session_factory",
    "get_db",
]
