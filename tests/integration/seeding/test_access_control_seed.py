"""Tests for the access-control and demo seeders."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffdesk.core.auth.backend import verify_password
from staffdesk.core.permissions.models import Permission, Role
from staffdesk.core.permissions.seeding import (
    DEMO_EMAIL,
    DEMO_PASSWORD,
    seed_access_control,
    seed_demo_users,
)
from staffdesk.modules.users.models import User
from tests.factories import UserFactory


pytestmark = pytest.mark.integration


async def _count(db: AsyncSession, column) -> int:
    return (await db.execute(select(func.count(column)))).scalar_one()


def _slugs(role: Role) -> list[str]:
    return [permission.slug for permission in role.permissions]


class TestSeedAccessControl:
    """Tests for seed_access_control."""

    async def test_creates_system_roles_with_bundles(self, db: AsyncSession):
        roles = await seed_access_control(db)

        assert sorted(roles) == ["admin", "analyst", "super-admin"]
        assert all(role.is_system for role in roles.values())
        assert _slugs(roles["super-admin"]) == [
            "view-dashboard",
            "manage-users",
            "manage-roles",
            "manage-settings",
        ]
        assert _slugs(roles["admin"]) == ["view-dashboard", "manage-users", "manage-roles"]
        assert _slugs(roles["analyst"]) == ["view-dashboard"]

    async def test_is_idempotent(self, db: AsyncSession):
        await seed_access_control(db)
        await db.commit()

        await seed_access_control(db)
        await db.commit()

        assert await _count(db, Permission.id) == 4
        assert await _count(db, Role.id) == 3

    async def test_restores_edited_bundle(self, db: AsyncSession):
        roles = await seed_access_control(db)
        roles["admin"].permissions = []
        roles["admin"].description = "edited"
        await db.commit()

        roles = await seed_access_control(db)

        assert len(roles["admin"].permissions) == 3
        assert roles["admin"].description == "Administrative access for user and role operations."

    async def test_assigns_existing_users(self, db: AsyncSession):
        oldest = UserFactory.build(email="first@example.com")
        oldest.roles = []
        db.add(oldest)
        await db.flush()
        later = UserFactory.build(email="second@example.com")
        later.roles = []
        db.add(later)
        await db.flush()

        roles = await seed_access_control(db)
        await db.commit()

        assert [role.slug for role in oldest.roles] == ["super-admin"]
        assert [role.slug for role in later.roles] == ["analyst"]
        assert roles["super-admin"] in oldest.roles

    async def test_users_with_roles_keep_them(self, db: AsyncSession):
        roles = await seed_access_control(db)
        oldest = UserFactory.build()
        oldest.roles = []
        db.add(oldest)
        await db.flush()
        manager = UserFactory.build()
        manager.roles = [roles["admin"]]
        db.add(manager)
        await db.commit()

        await seed_access_control(db)

        assert [role.slug for role in manager.roles] == ["admin"]
        assert [role.slug for role in oldest.roles] == ["super-admin"]


class TestSeedDemoUsers:
    """Tests for seed_demo_users."""

    async def test_tops_up_to_five_users(self, db: AsyncSession):
        created = await seed_demo_users(db)
        await db.commit()

        assert created == 5
        assert await _count(db, User.id) == 5

        demo = (await db.execute(select(User).where(User.email == DEMO_EMAIL))).scalar_one()
        assert verify_password(DEMO_PASSWORD, demo.password_hash)

    async def test_second_run_creates_nothing(self, db: AsyncSession):
        await seed_demo_users(db)
        await db.commit()

        assert await seed_demo_users(db) == 0
        assert await _count(db, User.id) == 5
