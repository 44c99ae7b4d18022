"""User repository for database operations."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import Select, func, or_, select

from staffdesk.api.dependencies import DBSession, PageParams
from staffdesk.core.permissions.models import Role
from staffdesk.core.utils.text import LIKE_ESCAPE_CHAR, contains_pattern
from staffdesk.modules.users.models import User


class UserRepository:
    """Repository for User database operations.

    Handles all database interactions for the User model.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID and timestamps populated
        """
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's id

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address, ignoring case.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        """Check whether another user already uses ``email`` (any case).

        Args:
            email: Address to look for
            exclude_id: User to ignore (the row being updated)

        Returns:
            True if the address belongs to someone else
        """
        stmt = select(User.id).where(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    def _filtered(
        self,
        stmt: Select,  # type: ignore[type-arg]
        search: str | None,
        role: str | None,
    ) -> Select:  # type: ignore[type-arg]
        if search:
            pattern = contains_pattern(search)
            stmt = stmt.where(
                or_(
                    User.name.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    User.email.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                )
            )
        if role:
            stmt = stmt.where(User.roles.any(Role.slug == role))
        return stmt

    async def paginate(
        self,
        page: PageParams,
        search: str | None = None,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """List users, newest first, with optional filters.

        Args:
            page: Pagination parameters
            search: Substring matched against name or email, ignoring case
            role: Exact role slug the user must hold

        Returns:
            Tuple of (users list, total count)
        """
        count_stmt = self._filtered(select(func.count(User.id)), search, role)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            self._filtered(select(User), search, role)
            .order_by(User.id.desc())
            .offset(page.offset)
            .limit(page.per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update(self, user: User) -> User:
        """Flush pending changes to a user and reload it.

        Args:
            user: User instance with updated fields

        Returns:
            The updated user
        """
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        """Delete a user after removing its role assignments.

        Args:
            user: User instance to delete
        """
        user.roles.clear()
        await self.session.flush()
        await self.session.delete(user)
        await self.session.flush()

    async def count(self) -> int:
        """Count all users."""
        return (await self.session.execute(select(func.count(User.id)))).scalar_one()

    async def count_verified(self) -> int:
        """Count users whose email address is verified."""
        stmt = select(func.count(User.id)).where(User.email_verified_at.is_not(None))
        return (await self.session.execute(stmt)).scalar_one()


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
