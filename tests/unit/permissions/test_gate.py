"""Tests for the authorization gate."""

import pytest
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from staffdesk.core.errors import ForbiddenError
from staffdesk.core.permissions.gate import Gate
from staffdesk.core.permissions.models import Role, user_roles
from staffdesk.core.permissions.policies import PolicyAction, PolicyTarget


pytestmark = pytest.mark.unit


class TestAbilityChecks:
    """Tests for ability checks without a target."""

    async def test_user_without_roles_is_denied_everything(self, db: AsyncSession, make_user):
        user = await make_user()
        gate = Gate(db)

        for ability in ("view-dashboard", "manage-users", "manage-roles", "manage-settings"):
            assert await gate.denies(user, ability)

    async def test_analyst_can_only_view_dashboard(self, db: AsyncSession, analyst):
        gate = Gate(db)

        assert await gate.allows(analyst, "view-dashboard")
        assert await gate.denies(analyst, "manage-users")
        assert await gate.denies(analyst, "manage-roles")

    async def test_admin_lacks_manage_settings(self, db: AsyncSession, admin):
        gate = Gate(db)

        assert await gate.allows(admin, "manage-users")
        assert await gate.denies(admin, "manage-settings")

    async def test_unknown_ability_is_denied(self, db: AsyncSession, admin):
        assert await Gate(db).denies(admin, "launch-rockets")


class TestSuperAdminBypass:
    """Tests for the super-admin short circuit."""

    async def test_allows_unknown_abilities(self, db: AsyncSession, super_admin):
        assert await Gate(db).allows(super_admin, "launch-rockets")

    async def test_allows_deleting_system_roles(self, db: AsyncSession, super_admin, system_roles):
        target = PolicyTarget.for_role(system_roles["admin"])

        assert await Gate(db).allows(super_admin, PolicyAction.DELETE, target)


class TestTargetPolicies:
    """Tests for checks that carry a target."""

    async def test_admin_cannot_delete_system_role(self, db: AsyncSession, admin, system_roles):
        gate = Gate(db)
        target = PolicyTarget.for_role(system_roles["analyst"])

        assert await gate.allows(admin, PolicyAction.UPDATE, target)
        assert await gate.denies(admin, PolicyAction.DELETE, target)

    async def test_admin_can_delete_custom_role(self, db: AsyncSession, admin):
        role = Role(name="Support", slug="support", is_system=False)
        db.add(role)
        await db.flush()

        assert await Gate(db).allows(admin, PolicyAction.DELETE, PolicyTarget.for_role(role))


class TestAuthorize:
    """Tests for Gate.authorize."""

    async def test_raises_forbidden_on_deny(self, db: AsyncSession, analyst):
        with pytest.raises(ForbiddenError) as exc_info:
            await Gate(db).authorize(analyst, "manage-users")

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "This action is unauthorized."

    async def test_returns_none_on_allow(self, db: AsyncSession, admin):
        assert await Gate(db).authorize(admin, "manage-roles") is None


class TestMemoization:
    """Tests for per-gate grant memoization."""

    async def test_grants_are_memoized_until_forgotten(self, db: AsyncSession, admin, system_roles):
        gate = Gate(db)
        assert await gate.allows(admin, "manage-users")

        await db.execute(
            delete(user_roles).where(user_roles.c.role_id == system_roles["admin"].id)
        )

        # Still served from the memo
        assert await gate.allows(admin, "manage-users")

        gate.forget(admin)
        assert await gate.denies(admin, "manage-users")

    async def test_forget_without_user_clears_everyone(self, db: AsyncSession, admin, analyst):
        gate = Gate(db)
        await gate.grants_for(admin)
        await gate.grants_for(analyst)

        gate.forget()

        assert gate._grants == {}

    async def test_abilities_map(self, db: AsyncSession, admin):
        abilities = await Gate(db).abilities(admin)

        assert abilities == {
            "view-dashboard": True,
            "manage-users": True,
            "manage-roles": True,
            "manage-settings": False,
        }
