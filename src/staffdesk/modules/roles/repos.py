"""Role and permission repositories."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import delete, func, select
from sqlalchemy.sql.elements import ColumnElement

from staffdesk.api.dependencies import DBSession, PageParams
from staffdesk.core.permissions.models import Permission, Role, user_roles
from staffdesk.core.utils.text import LIKE_ESCAPE_CHAR, contains_pattern


def users_count_column() -> ColumnElement[int]:
    """Correlated count of users assigned to the selected role."""
    return (
        select(func.count(user_roles.c.user_id))
        .where(user_roles.c.role_id == Role.id)
        .correlate(Role)
        .scalar_subquery()
        .label("users_count")
    )


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, role: Role) -> Role:
        """Create a new role.

        Args:
            role: Role instance to create

        Returns:
            The created role with ID and timestamps populated
        """
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def get_by_id(self, role_id: int) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: The role's id

        Returns:
            Role if found, None otherwise
        """
        result = await self.session.execute(select(Role).where(Role.id == role_id))
        return result.scalar_one_or_none()

    async def get_many(self, role_ids: list[int]) -> dict[int, Role]:
        """Fetch roles by id.

        Args:
            role_ids: Ids to look up (duplicates allowed)

        Returns:
            Mapping of id to role for the ids that exist
        """
        if not role_ids:
            return {}
        result = await self.session.execute(select(Role).where(Role.id.in_(set(role_ids))))
        return {role.id: role for role in result.scalars().all()}

    async def slug_taken(self, slug: str, exclude_id: int | None = None) -> bool:
        """Check whether another role already uses ``slug`` (exact match).

        Args:
            slug: Slug to look for
            exclude_id: Role to ignore (the row being updated)

        Returns:
            True if the slug belongs to another role
        """
        stmt = select(Role.id).where(Role.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def paginate(
        self,
        page: PageParams,
        search: str | None = None,
    ) -> tuple[list[tuple[Role, int]], int]:
        """List roles ordered by name, each with its user count.

        Args:
            page: Pagination parameters
            search: Substring matched against the name, ignoring case

        Returns:
            Tuple of ((role, users_count) list, total count)
        """
        criteria = []
        if search:
            criteria.append(Role.name.ilike(contains_pattern(search), escape=LIKE_ESCAPE_CHAR))

        total = (
            await self.session.execute(select(func.count(Role.id)).where(*criteria))
        ).scalar_one()

        stmt = (
            select(Role, users_count_column())
            .where(*criteria)
            .order_by(Role.name, Role.id)
            .offset(page.offset)
            .limit(page.per_page)
        )
        rows = (await self.session.execute(stmt)).all()
        return [(role, count) for role, count in rows], total

    async def users_count(self, role: Role) -> int:
        """Number of users assigned to ``role``."""
        stmt = select(func.count(user_roles.c.user_id)).where(user_roles.c.role_id == role.id)
        return (await self.session.execute(stmt)).scalar_one()

    async def update(self, role: Role) -> Role:
        """Flush pending changes to a role and reload it."""
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def delete(self, role: Role) -> None:
        """Delete a role with its permission and user assignments.

        Args:
            role: Role instance to delete
        """
        role.permissions.clear()
        await self.session.flush()
        await self.session.execute(delete(user_roles).where(user_roles.c.role_id == role.id))
        await self.session.delete(role)
        await self.session.flush()

    async def count(self) -> int:
        """Count all roles."""
        return (await self.session.execute(select(func.count(Role.id)))).scalar_one()


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_many(self, permission_ids: list[int]) -> dict[int, Permission]:
        """Fetch permissions by id.

        Args:
            permission_ids: Ids to look up (duplicates allowed)

        Returns:
            Mapping of id to permission for the ids that exist
        """
        if not permission_ids:
            return {}
        stmt = select(Permission).where(Permission.id.in_(set(permission_ids)))
        result = await self.session.execute(stmt)
        return {permission.id: permission for permission in result.scalars().all()}

    async def list_all(self) -> list[Permission]:
        """All permissions ordered by name."""
        result = await self.session.execute(select(Permission).order_by(Permission.name))
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count all permissions."""
        return (await self.session.execute(select(func.count(Permission.id)))).scalar_one()


# Type aliases for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]
