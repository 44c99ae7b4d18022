"""Async database session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from staffdesk.config import settings


def build_engine(url: str | None = None, **overrides: Any) -> AsyncEngine:
    """Create an async engine for the configured database.

    Pool sizing only applies to server databases; SQLite uses its own
    connection handling and rejects ``pool_size``.

    Args:
        url: Database URL (defaults to ``settings.async_database_url``)
        **overrides: Extra keyword arguments forwarded to the engine

    Returns:
        A configured AsyncEngine
    """
    url = url or settings.async_database_url
    options: dict[str, Any] = {"echo": settings.database_echo}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,  # Verify connections before use
        )
    options.update(overrides)
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create async engine
async_engine = build_engine()

# Create async session factory
async_session_factory = build_session_factory(async_engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session.

    The session commits once the request handler returns and rolls back if
    anything raised, so multi-row changes (a role plus its permission set)
    land together or not at all.

    Usage:
        @router.get("/items")
        async def list_items(db: DBSession):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
