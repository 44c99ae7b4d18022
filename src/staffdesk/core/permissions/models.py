"""Access control database models.

This module defines the RBAC (Role-Based Access Control) tables:
- Permission: a named ability identified by its slug
- Role: a named bundle of permissions, optionally system-protected
- role_permissions / user_roles: the assignment graph join tables
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffdesk.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SLUG_LENGTH,
)
from staffdesk.core.database.base import Base, IntegerIdMixin, TimestampMixin


# Junction table for Role <-> Permission many-to-many relationship
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "permission_id",
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)

# Junction table for User <-> Role many-to-many relationship
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Permission(Base, IntegerIdMixin, TimestampMixin):
    """Permission model representing a single ability.

    Policy code only ever compares ``slug``; ``name`` and ``description``
    are display text and may change freely.

    Examples:
        - slug="view-dashboard" -> may open the admin dashboard
        - slug="manage-users" -> may administer user accounts
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH),
        nullable=False,
        unique=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Permission({self.slug})>"


class Role(Base, IntegerIdMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    Attributes:
        name: Display name (e.g., "Admin")
        slug: Stable policy key (e.g., "admin")
        description: Human-readable description of the role
        is_system: Protected roles cannot be deleted through the API
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH),
        nullable=False,
        unique=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
    )

    # Relationships
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=role_permissions,
        lazy="selectin",
        order_by="Permission.id",
    )

    @property
    def permission_slugs(self) -> set[str]:
        """Slugs of the permissions bundled in this role."""
        return {permission.slug for permission in self.permissions}

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, slug={self.slug}, is_system={self.is_system})>"
