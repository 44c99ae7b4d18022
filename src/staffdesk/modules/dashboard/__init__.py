"""Dashboard module with headline account statistics."""

from fastapi import APIRouter, Depends

from staffdesk.core.auth.dependencies import get_current_user
from staffdesk.core.constants import ADMIN_API_LIMITER, VIEW_DASHBOARD
from staffdesk.core.permissions.dependencies import require_permission
from staffdesk.core.rate_limit.dependencies import throttle


router = APIRouter(
    prefix="/admin/dashboard",
    tags=["dashboard"],
    dependencies=[
        Depends(get_current_user),
        Depends(throttle(ADMIN_API_LIMITER)),
        Depends(require_permission(VIEW_DASHBOARD)),
    ],
)

from staffdesk.modules.dashboard import routes  # noqa: F401, E402


__module__ = {
    "name": "dashboard",
    "version": "1.0.0",
    "description": "Admin dashboard statistics",
    "dependencies": ["users", "roles"],
}
