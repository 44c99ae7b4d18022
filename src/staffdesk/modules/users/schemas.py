"""Pydantic schemas for user administration."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationInfo,
    field_validator,
)

from staffdesk.api.schemas import (
    PageMeta,
    field_label,
    require_ids,
    require_text,
)
from staffdesk.core.auth.passwords import validate_password_policy
from staffdesk.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH


ROLE_IDS_REQUIRED = "At least one role must be assigned to the user."


# ============================================================
# Request Schemas
# ============================================================


class UserWrite(BaseModel):
    """Fields shared by create and update.

    Only these fields are ever bound to a user row; anything else in the
    request body is ignored.
    """

    name: str = Field(..., max_length=MAX_NAME_LENGTH)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_present(cls, v: str, info: ValidationInfo) -> str:
        return require_text(v, info)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str, info: ValidationInfo) -> str:
        """Lower-case the address and enforce the column length."""
        if len(v) > MAX_EMAIL_LENGTH:
            raise ValueError(
                f"The {field_label(info)} field must not be greater than "
                f"{MAX_EMAIL_LENGTH} characters."
            )
        return v.lower()


class UserCreate(UserWrite):
    """Schema for creating a user."""

    password: str
    role_ids: list[int] = Field(default=None, validate_default=True)  # type: ignore[assignment]

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        """Validate password against the deployment's policy."""
        return validate_password_policy(v)

    @field_validator("role_ids", mode="before")
    @classmethod
    def roles_required(cls, v: Any) -> Any:
        return require_ids(v, ROLE_IDS_REQUIRED)


class UserUpdate(UserWrite):
    """Schema for updating a user.

    An omitted or empty password keeps the current one. ``role_ids``
    replaces every assignment when present and may not be empty.
    """

    password: str | None = None
    role_ids: list[int] | None = None

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str | None) -> str | None:
        """Validate a replacement password, if one was given.

        Passwords are never trimmed; only an empty string means "unchanged".
        """
        if not v:
            return None
        return validate_password_policy(v)

    @field_validator("role_ids", mode="before")
    @classmethod
    def roles_not_empty(cls, v: Any) -> Any:
        return require_ids(v, ROLE_IDS_REQUIRED)


# ============================================================
# Response Schemas
# ============================================================


class RoleSummary(BaseModel):
    """A role as shown on a user."""

    id: int
    name: str
    slug: str
    description: str | None = None
    is_system: bool

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Schema for user response data."""

    id: int
    name: str
    email: str
    email_verified_at: datetime | None = None
    roles: list[RoleSummary]
    permission_slugs: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    """Single user response."""

    data: UserResponse


class UserListResponse(BaseModel):
    """Paginated user list."""

    data: list[UserResponse]
    meta: PageMeta


class CurrentUserResponse(UserResponse):
    """The authenticated user plus the core abilities they hold."""

    abilities: dict[str, bool]
