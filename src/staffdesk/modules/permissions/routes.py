"""Permission catalogue routes."""

from staffdesk.modules.permissions import router
from staffdesk.modules.roles.repos import PermissionRepo
from staffdesk.modules.roles.schemas import PermissionListResponse, PermissionResponse


@router.get(
    "",
    response_model=PermissionListResponse,
    summary="List permissions",
    description="Every permission, for choosing a role's permission_ids.",
)
async def list_permissions(repo: PermissionRepo) -> PermissionListResponse:
    permissions = await repo.list_all()
    return PermissionListResponse(
        data=[PermissionResponse.model_validate(p) for p in permissions]
    )
