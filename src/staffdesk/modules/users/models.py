"""User database models."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffdesk.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from staffdesk.core.database.base import Base, IntegerIdMixin, TimestampMixin
from staffdesk.core.permissions.models import user_roles


if TYPE_CHECKING:
    from staffdesk.core.permissions.models import Role


class User(Base, IntegerIdMixin, TimestampMixin):
    """User model representing a staff account.

    Attributes:
        name: Display name
        email: Unique email address, stored lower-cased
        password_hash: Bcrypt-hashed password
        email_verified_at: When the address was confirmed, if ever
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    email_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Roles are small and needed for nearly every response, load eagerly
    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary=user_roles,
        lazy="selectin",
        order_by="Role.id",
    )

    @property
    def permission_slugs(self) -> list[str]:
        """Unique permission slugs granted through any role, sorted."""
        return sorted({slug for role in self.roles for slug in role.permission_slugs})

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
