"""User service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends
from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError

from staffdesk.api.dependencies import PageParams
from staffdesk.config import settings
from staffdesk.core.auth.backend import hash_password
from staffdesk.core.auth.passwords import COMPROMISED_MESSAGE, is_password_compromised
from staffdesk.core.constants import WELCOME_NOTIFICATION_JOB
from staffdesk.core.errors import NotFoundError, ValidationError
from staffdesk.core.jobs import enqueue
from staffdesk.core.permissions.gate import GateDep
from staffdesk.core.permissions.models import Role
from staffdesk.core.utils.text import filter_term
from staffdesk.modules.roles.repos import RoleRepo
from staffdesk.modules.users.models import User
from staffdesk.modules.users.repos import UserRepo
from staffdesk.modules.users.schemas import UserCreate, UserUpdate


logger = structlog.get_logger()

EMAIL_TAKEN = "The email has already been taken."


class UserService:
    """Service for user administration.

    Contains business logic for user CRUD operations and the role
    assignments that come with them.
    """

    def __init__(self, repo: UserRepo, role_repo: RoleRepo, gate: GateDep) -> None:
        self.repo = repo
        self.role_repo = role_repo
        self.gate = gate

    async def list_users(
        self,
        page: PageParams,
        search: str | None = None,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """List users, newest first.

        Args:
            page: Pagination parameters
            search: Substring of name or email
            role: Exact role slug filter

        Returns:
            Tuple of (users list, total count)
        """
        return await self.repo.paginate(page, search=filter_term(search), role=filter_term(role))

    async def get_user(self, user_id: int) -> User:
        """Get a user by ID.

        Args:
            user_id: The user's id

        Returns:
            The user

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def create_user(self, data: UserCreate) -> User:
        """Create a user with its roles and queue the welcome notification.

        The user is committed before the job is queued so the worker can
        always load it. A queue outage is logged and does not undo the user.

        Args:
            data: Validated creation payload

        Returns:
            The created user

        Raises:
            ValidationError: If the email is taken, a role id is unknown or
                the password is compromised
        """
        errors: dict[str, list[str]] = {}
        await self._check_email(data.email, None, errors)
        roles = await self._resolve_roles(data.role_ids, errors)
        await self._check_password(data.password, errors)
        if errors:
            raise ValidationError(errors=errors)

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        user.roles = roles
        try:
            user = await self.repo.create(user)
        except IntegrityError as exc:
            raise ValidationError.for_field("email", EMAIL_TAKEN) from exc

        await self.repo.session.commit()
        logger.info("user_created", user_id=user.id, role_ids=[r.id for r in roles])

        await self._queue_welcome_notification(user)
        return user

    async def update_user(self, user: User, data: UserUpdate) -> User:
        """Update a user.

        Name and email are always replaced. The password changes only when
        a non-empty one is given; roles only when ``role_ids`` is present.

        Args:
            user: The user being updated
            data: Validated update payload

        Returns:
            The updated user

        Raises:
            ValidationError: If the email is taken or a role id is unknown
        """
        errors: dict[str, list[str]] = {}
        await self._check_email(data.email, user.id, errors)
        roles = None
        if data.role_ids is not None:
            roles = await self._resolve_roles(data.role_ids, errors)
        if data.password:
            await self._check_password(data.password, errors)
        if errors:
            raise ValidationError(errors=errors)

        user.name = data.name
        user.email = data.email
        if data.password:
            user.password_hash = hash_password(data.password)
        if roles is not None:
            user.roles = roles

        try:
            user = await self.repo.update(user)
        except IntegrityError as exc:
            raise ValidationError.for_field("email", EMAIL_TAKEN) from exc

        self.gate.forget(user)
        logger.info("user_updated", user_id=user.id, roles_replaced=roles is not None)
        return user

    async def delete_user(self, user: User) -> None:
        """Delete a user and its role assignments.

        Args:
            user: The user to delete
        """
        user_id = user.id
        await self.repo.delete(user)
        self.gate.forget(user)
        logger.info("user_deleted", user_id=user_id)

    async def _check_email(
        self,
        email: str,
        exclude_id: int | None,
        errors: dict[str, list[str]],
    ) -> None:
        if await self.repo.email_taken(email, exclude_id):
            errors.setdefault("email", []).append(EMAIL_TAKEN)

    async def _resolve_roles(
        self,
        role_ids: list[int],
        errors: dict[str, list[str]],
    ) -> list[Role]:
        found = await self.role_repo.get_many(role_ids)
        for index, role_id in enumerate(role_ids):
            if role_id not in found:
                field = f"role_ids.{index}"
                errors.setdefault(field, []).append(f"The selected {field} is invalid.")
        # Duplicates collapse to one assignment, in request order
        return list({role_id: found[role_id] for role_id in role_ids if role_id in found}.values())

    async def _check_password(self, password: str, errors: dict[str, list[str]]) -> None:
        if settings.is_production and await is_password_compromised(password):
            errors.setdefault("password", []).append(COMPROMISED_MESSAGE)

    async def _queue_welcome_notification(self, user: User) -> None:
        try:
            await enqueue(WELCOME_NOTIFICATION_JOB, user.id)
        except (RuntimeError, RedisError, OSError) as exc:
            logger.error(
                "welcome_notification_enqueue_failed",
                user_id=user.id,
                error=str(exc),
            )


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
