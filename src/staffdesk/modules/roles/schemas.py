"""Pydantic schemas for role administration."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from staffdesk.api.schemas import PageMeta, blank_to_none, require_ids, require_text
from staffdesk.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SLUG_LENGTH,
)
from staffdesk.core.permissions.models import Role


PERMISSION_IDS_REQUIRED = "Select at least one permission for this role."

# Letters, digits, dashes and underscores
SLUG_PATTERN = r"^[A-Za-z0-9_-]+$"


# ============================================================
# Request Schemas
# ============================================================


class RoleWrite(BaseModel):
    """Fields shared by create and update.

    ``is_system`` is deliberately absent: it cannot be set through the API.
    """

    name: str = Field(..., max_length=MAX_NAME_LENGTH)
    slug: str = Field(..., max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("name")
    @classmethod
    def name_present(cls, v: str, info: ValidationInfo) -> str:
        return require_text(v, info)

    @field_validator("description")
    @classmethod
    def empty_description(cls, v: str | None) -> str | None:
        return blank_to_none(v)


class RoleCreate(RoleWrite):
    """Schema for creating a role."""

    permission_ids: list[int] = Field(default=None, validate_default=True)  # type: ignore[assignment]

    @field_validator("permission_ids", mode="before")
    @classmethod
    def permissions_required(cls, v: Any) -> Any:
        return require_ids(v, PERMISSION_IDS_REQUIRED)


class RoleUpdate(RoleWrite):
    """Schema for updating a role.

    Name, slug and description are always replaced. ``permission_ids``
    replaces the permission set only when present, and may not be empty.
    """

    permission_ids: list[int] | None = None

    @field_validator("permission_ids", mode="before")
    @classmethod
    def permissions_not_empty(cls, v: Any) -> Any:
        return require_ids(v, PERMISSION_IDS_REQUIRED)


# ============================================================
# Response Schemas
# ============================================================


class PermissionResponse(BaseModel):
    """A permission as shown on a role."""

    id: int
    name: str
    slug: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RoleResponse(BaseModel):
    """Schema for role response data."""

    id: int
    name: str
    slug: str
    description: str | None = None
    is_system: bool
    permissions: list[PermissionResponse]
    users_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_role(cls, role: Role, users_count: int) -> "RoleResponse":
        return cls(
            id=role.id,
            name=role.name,
            slug=role.slug,
            description=role.description,
            is_system=role.is_system,
            permissions=[PermissionResponse.model_validate(p) for p in role.permissions],
            users_count=users_count,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class RoleEnvelope(BaseModel):
    """Single role response."""

    data: RoleResponse


class RoleListResponse(BaseModel):
    """Paginated role list."""

    data: list[RoleResponse]
    meta: PageMeta


class PermissionListResponse(BaseModel):
    """Every permission, for building role forms."""

    data: list[PermissionResponse]
