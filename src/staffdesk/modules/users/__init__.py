"""Users module for account administration."""

from fastapi import APIRouter, Depends

from staffdesk.core.auth.dependencies import get_current_user
from staffdesk.core.constants import ADMIN_API_LIMITER, MANAGE_USERS
from staffdesk.core.permissions.dependencies import require_permission
from staffdesk.core.rate_limit.dependencies import throttle


router = APIRouter(
    prefix="/admin/users",
    tags=["users"],
    dependencies=[
        Depends(get_current_user),
        Depends(throttle(ADMIN_API_LIMITER)),
        Depends(require_permission(MANAGE_USERS)),
    ],
)

# Import routes to register them (must be after router is defined)
from staffdesk.modules.users import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "User account administration",
    "dependencies": ["roles"],
}
