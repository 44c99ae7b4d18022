"""Role service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from staffdesk.api.dependencies import PageParams
from staffdesk.core.errors import NotFoundError, ValidationError
from staffdesk.core.permissions.gate import GateDep
from staffdesk.core.permissions.models import Permission, Role
from staffdesk.core.utils.text import filter_term
from staffdesk.modules.roles.repos import PermissionRepo, RoleRepo
from staffdesk.modules.roles.schemas import RoleCreate, RoleUpdate


logger = structlog.get_logger()

SLUG_TAKEN = "The slug has already been taken."


class RoleService:
    """Service for role administration.

    Every change to a role's permission set or existence invalidates the
    request's memoized grants.
    """

    def __init__(
        self,
        repo: RoleRepo,
        permission_repo: PermissionRepo,
        gate: GateDep,
    ) -> None:
        self.repo = repo
        self.permission_repo = permission_repo
        self.gate = gate

    async def list_roles(
        self,
        page: PageParams,
        search: str | None = None,
    ) -> tuple[list[tuple[Role, int]], int]:
        """List roles by name with their user counts.

        Args:
            page: Pagination parameters
            search: Substring of the role name

        Returns:
            Tuple of ((role, users_count) list, total count)
        """
        return await self.repo.paginate(page, search=filter_term(search))

    async def get_role(self, role_id: int) -> Role:
        """Get a role by ID.

        Raises:
            NotFoundError: If role not found
        """
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError(resource="role", resource_id=role_id)
        return role

    async def users_count(self, role: Role) -> int:
        return await self.repo.users_count(role)

    async def create_role(self, data: RoleCreate) -> Role:
        """Create a role together with its permission set.

        New roles are never system-protected.

        Args:
            data: Validated creation payload

        Returns:
            The created role

        Raises:
            ValidationError: If the slug is taken or a permission id is unknown
        """
        errors: dict[str, list[str]] = {}
        await self._check_slug(data.slug, None, errors)
        permissions = await self._resolve_permissions(data.permission_ids, errors)
        if errors:
            raise ValidationError(errors=errors)

        role = Role(
            name=data.name,
            slug=data.slug,
            description=data.description,
            is_system=False,
        )
        role.permissions = permissions
        try:
            role = await self.repo.create(role)
        except IntegrityError as exc:
            raise ValidationError.for_field("slug", SLUG_TAKEN) from exc

        self.gate.forget()
        logger.info("role_created", role_id=role.id, slug=role.slug)
        return role

    async def update_role(self, role: Role, data: RoleUpdate) -> Role:
        """Update a role.

        Args:
            role: The role being updated
            data: Validated update payload

        Returns:
            The updated role

        Raises:
            ValidationError: If the slug is taken or a permission id is unknown
        """
        errors: dict[str, list[str]] = {}
        await self._check_slug(data.slug, role.id, errors)
        permissions = None
        if data.permission_ids is not None:
            permissions = await self._resolve_permissions(data.permission_ids, errors)
        if errors:
            raise ValidationError(errors=errors)

        role.name = data.name
        role.slug = data.slug
        role.description = data.description
        if permissions is not None:
            role.permissions = permissions

        try:
            role = await self.repo.update(role)
        except IntegrityError as exc:
            raise ValidationError.for_field("slug", SLUG_TAKEN) from exc

        self.gate.forget()
        logger.info(
            "role_updated",
            role_id=role.id,
            slug=role.slug,
            permissions_replaced=permissions is not None,
        )
        return role

    async def delete_role(self, role: Role) -> None:
        """Delete a role, detaching its permissions and users first.

        Args:
            role: The role to delete
        """
        role_id, slug = role.id, role.slug
        await self.repo.delete(role)
        self.gate.forget()
        logger.info("role_deleted", role_id=role_id, slug=slug)

    async def _check_slug(
        self,
        slug: str,
        exclude_id: int | None,
        errors: dict[str, list[str]],
    ) -> None:
        if await self.repo.slug_taken(slug, exclude_id):
            errors.setdefault("slug", []).append(SLUG_TAKEN)

    async def _resolve_permissions(
        self,
        permission_ids: list[int],
        errors: dict[str, list[str]],
    ) -> list[Permission]:
        found = await self.permission_repo.get_many(permission_ids)
        for index, permission_id in enumerate(permission_ids):
            if permission_id not in found:
                field = f"permission_ids.{index}"
                errors.setdefault(field, []).append(f"The selected {field} is invalid.")
        return list(
            {pid: found[pid] for pid in permission_ids if pid in found}.values()
        )


# Type alias for dependency injection
RoleSvc = Annotated[RoleService, Depends(RoleService)]
