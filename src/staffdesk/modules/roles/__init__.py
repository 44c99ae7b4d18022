"""Roles module for role and permission-set administration."""

from fastapi import APIRouter, Depends

from staffdesk.core.auth.dependencies import get_current_user
from staffdesk.core.constants import ADMIN_API_LIMITER, MANAGE_ROLES
from staffdesk.core.permissions.dependencies import require_permission
from staffdesk.core.rate_limit.dependencies import throttle


router = APIRouter(
    prefix="/admin/roles",
    tags=["roles"],
    dependencies=[
        Depends(get_current_user),
        Depends(throttle(ADMIN_API_LIMITER)),
        Depends(require_permission(MANAGE_ROLES)),
    ],
)

# Import routes to register them (must be after router is defined)
from staffdesk.modules.roles import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "roles",
    "version": "1.0.0",
    "description": "Role administration",
    "dependencies": ["permissions"],
}
