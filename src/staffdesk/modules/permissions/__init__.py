"""Read-only permission catalogue for role editors."""

from fastapi import APIRouter, Depends

from staffdesk.core.auth.dependencies import get_current_user
from staffdesk.core.constants import ADMIN_API_LIMITER, MANAGE_ROLES
from staffdesk.core.permissions.dependencies import require_permission
from staffdesk.core.rate_limit.dependencies import throttle


router = APIRouter(
    prefix="/admin/permissions",
    tags=["roles"],
    dependencies=[
        Depends(get_current_user),
        Depends(throttle(ADMIN_API_LIMITER)),
        Depends(require_permission(MANAGE_ROLES)),
    ],
)

from staffdesk.modules.permissions import routes  # noqa: F401, E402


__module__ = {
    "name": "permissions",
    "version": "1.0.0",
    "description": "Permission catalogue",
    "dependencies": ["roles"],
}
