"""Dashboard statistics."""

from typing import Annotated

from fastapi import Depends

from staffdesk.modules.dashboard.schemas import DashboardStats
from staffdesk.modules.roles.repos import PermissionRepo, RoleRepo
from staffdesk.modules.users.repos import UserRepo


class DashboardService:
    """Aggregates counts across the access control tables."""

    def __init__(
        self,
        users: UserRepo,
        roles: RoleRepo,
        permissions: PermissionRepo,
    ) -> None:
        self.users = users
        self.roles = roles
        self.permissions = permissions

    async def stats(self) -> DashboardStats:
        return DashboardStats(
            users_count=await self.users.count(),
            roles_count=await self.roles.count(),
            permissions_count=await self.permissions.count(),
            verified_users_count=await self.users.count_verified(),
        )


DashboardSvc = Annotated[DashboardService, Depends(DashboardService)]
