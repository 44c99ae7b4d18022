"""User administration routes.

Login and the current user's profile live under ``/auth``; everything here
manages other accounts.
"""

from typing import Annotated

from fastapi import Depends, Query, status

from staffdesk.api.dependencies import Pagination
from staffdesk.api.schemas import PageMeta
from staffdesk.core.permissions.dependencies import authorize_resource
from staffdesk.core.permissions.policies import PolicyAction, ResourceKind
from staffdesk.modules.users import router
from staffdesk.modules.users.dependencies import authorized_user
from staffdesk.modules.users.models import User
from staffdesk.modules.users.schemas import (
    UserCreate,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from staffdesk.modules.users.services import UserSvc


ViewedUser = Annotated[User, Depends(authorized_user(PolicyAction.VIEW))]
UpdatedUser = Annotated[User, Depends(authorized_user(PolicyAction.UPDATE))]
DeletedUser = Annotated[User, Depends(authorized_user(PolicyAction.DELETE))]


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="Newest first. Filter by name or email substring and by role slug.",
    dependencies=[Depends(authorize_resource(PolicyAction.VIEW_ANY, ResourceKind.USER))],
)
async def list_users(
    service: UserSvc,
    page: Pagination,
    search: Annotated[str | None, Query(description="Substring of name or email")] = None,
    role: Annotated[str | None, Query(description="Exact role slug")] = None,
) -> UserListResponse:
    users, total = await service.list_users(page, search=search, role=role)
    return UserListResponse(
        data=[UserResponse.model_validate(u) for u in users],
        meta=PageMeta.build(page, total),
    )


@router.post(
    "",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Creates the account with its roles and queues a welcome email.",
    dependencies=[Depends(authorize_resource(PolicyAction.CREATE, ResourceKind.USER))],
)
async def create_user(data: UserCreate, service: UserSvc) -> UserEnvelope:
    user = await service.create_user(data)
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.get("/{user_id}", response_model=UserEnvelope, summary="Get user")
async def get_user(user: ViewedUser) -> UserEnvelope:
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.patch(
    "/{user_id}",
    response_model=UserEnvelope,
    summary="Update user",
    description=(
        "An empty password keeps the current one. role_ids replaces every "
        "assignment when present."
    ),
)
async def update_user(
    data: UserUpdate,
    user: UpdatedUser,
    service: UserSvc,
) -> UserEnvelope:
    user = await service.update_user(user, data)
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
)
async def delete_user(user: DeletedUser, service: UserSvc) -> None:
    await service.delete_user(user)
