"""Role administration routes."""

from typing import Annotated

from fastapi import Depends, Query, status

from staffdesk.api.dependencies import Pagination
from staffdesk.api.schemas import PageMeta
from staffdesk.core.permissions.dependencies import authorize_resource
from staffdesk.core.permissions.models import Role
from staffdesk.core.permissions.policies import PolicyAction, ResourceKind
from staffdesk.modules.roles import router
from staffdesk.modules.roles.dependencies import authorized_role
from staffdesk.modules.roles.schemas import (
    RoleCreate,
    RoleEnvelope,
    RoleListResponse,
    RoleResponse,
    RoleUpdate,
)
from staffdesk.modules.roles.services import RoleSvc


ViewedRole = Annotated[Role, Depends(authorized_role(PolicyAction.VIEW))]
UpdatedRole = Annotated[Role, Depends(authorized_role(PolicyAction.UPDATE))]
DeletedRole = Annotated[Role, Depends(authorized_role(PolicyAction.DELETE))]


@router.get(
    "",
    response_model=RoleListResponse,
    summary="List roles",
    description="Roles ordered by name, with permissions and user counts.",
    dependencies=[Depends(authorize_resource(PolicyAction.VIEW_ANY, ResourceKind.ROLE))],
)
async def list_roles(
    service: RoleSvc,
    page: Pagination,
    search: Annotated[str | None, Query(description="Substring of the name")] = None,
) -> RoleListResponse:
    rows, total = await service.list_roles(page, search=search)
    return RoleListResponse(
        data=[RoleResponse.from_role(role, count) for role, count in rows],
        meta=PageMeta.build(page, total),
    )


@router.post(
    "",
    response_model=RoleEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    dependencies=[Depends(authorize_resource(PolicyAction.CREATE, ResourceKind.ROLE))],
)
async def create_role(data: RoleCreate, service: RoleSvc) -> RoleEnvelope:
    role = await service.create_role(data)
    return RoleEnvelope(data=RoleResponse.from_role(role, 0))


@router.get("/{role_id}", response_model=RoleEnvelope, summary="Get role")
async def get_role(role: ViewedRole, service: RoleSvc) -> RoleEnvelope:
    return RoleEnvelope(
        data=RoleResponse.from_role(role, await service.users_count(role))
    )


@router.patch(
    "/{role_id}",
    response_model=RoleEnvelope,
    summary="Update role",
    description=(
        "Replaces name, slug and description. The permission set is replaced "
        "only when permission_ids is present."
    ),
)
async def update_role(
    data: RoleUpdate,
    role: UpdatedRole,
    service: RoleSvc,
) -> RoleEnvelope:
    role = await service.update_role(role, data)
    return RoleEnvelope(
        data=RoleResponse.from_role(role, await service.users_count(role))
    )


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete role",
    description="System roles can only be deleted by a super-admin.",
)
async def delete_role(role: DeletedRole, service: RoleSvc) -> None:
    await service.delete_role(role)
