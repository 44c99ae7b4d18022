"""Pytest configuration and shared fixtures."""

import os


# Must be set before staffdesk.config is imported anywhere
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./.pytest-staffdesk.db"
os.environ["RATE_LIMIT_STORAGE"] = "memory"

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator  # noqa: E402
from pathlib import Path  # noqa: E402
from unittest.mock import AsyncMock, patch  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from staffdesk.core.database import Base, build_session_factory, get_db  # noqa: E402
from staffdesk.core.permissions.models import Permission, Role  # noqa: E402
from staffdesk.core.permissions.provisioning import AccessControlTables  # noqa: E402
from staffdesk.core.permissions.seeding import seed_access_control  # noqa: E402
from staffdesk.core.rate_limit.backend import MemoryWindowStore, rate_limiter  # noqa: E402
from staffdesk.main import create_app  # noqa: E402
from staffdesk.modules.users.models import User  # noqa: E402
from tests.factories import UserFactory, bearer  # noqa: E402


MakeUser = Callable[..., Awaitable[User]]


@pytest.fixture(autouse=True)
def reset_process_state() -> None:
    """Clear process-wide memos so every test starts cold."""
    AccessControlTables.reset()
    if isinstance(rate_limiter.store, MemoryWindowStore):
        rate_limiter.store.reset()


@pytest.fixture(autouse=True)
def queued_jobs() -> Generator[AsyncMock, None, None]:
    """Capture jobs enqueued by the user service instead of reaching Redis."""
    with patch(
        "staffdesk.modules.users.services.enqueue", new_callable=AsyncMock
    ) as mock:
        yield mock


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a throwaway SQLite database with the full schema."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'staffdesk.db'}",
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide the session shared by the test and the app under test."""
    async with build_session_factory(engine)() as session:
        yield session


@pytest.fixture
async def app(db: AsyncSession) -> AsyncGenerator[FastAPI, None]:
    """Create test application instance."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Access control fixtures
# ============================================================


@pytest.fixture
async def system_roles(db: AsyncSession) -> dict[str, Role]:
    """Seed the starter permissions and system roles (before any user exists).

    Returns:
        System roles keyed by slug
    """
    roles = await seed_access_control(db)
    await db.commit()
    for role in roles.values():
        await db.refresh(role)
    return roles


@pytest.fixture
async def permissions(db: AsyncSession, system_roles: dict[str, Role]) -> dict[str, Permission]:
    """Seeded permissions keyed by slug."""
    return {p.slug: p for p in system_roles["super-admin"].permissions}


@pytest.fixture
def make_user(db: AsyncSession, system_roles: dict[str, Role]) -> MakeUser:
    """Build a persisted user holding the named system roles."""

    async def _make(*role_slugs: str, extra_roles: list[Role] | None = None, **fields: object) -> User:
        user = UserFactory.build(**fields)
        user.roles = [system_roles[slug] for slug in role_slugs] + list(extra_roles or [])
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest.fixture
async def admin(make_user: MakeUser) -> User:
    return await make_user("admin")


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return bearer(admin)


@pytest.fixture
async def super_admin(make_user: MakeUser) -> User:
    return await make_user("super-admin")


@pytest.fixture
def super_admin_headers(super_admin: User) -> dict[str, str]:
    return bearer(super_admin)


@pytest.fixture
async def analyst(make_user: MakeUser) -> User:
    return await make_user("analyst")


@pytest.fixture
def analyst_headers(analyst: User) -> dict[str, str]:
    return bearer(analyst)
