"""Resource policies for the access control gate.

A policy answers "may this holder of these permissions perform ``action``
on ``target``?". The set of (resource kind, action) pairs is closed and
dispatched with a single ``match`` statement.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from staffdesk.core.constants import MANAGE_ROLES, MANAGE_USERS


if TYPE_CHECKING:
    from staffdesk.core.permissions.models import Role
    from staffdesk.modules.users.models import User


class ResourceKind(StrEnum):
    """Kinds of resources that carry their own policy."""

    ROLE = "role"
    USER = "user"


class PolicyAction(StrEnum):
    """Actions a policy can be asked about."""

    VIEW_ANY = "view-any"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"
    FORCE_DELETE = "force-delete"


@dataclass(frozen=True)
class PolicyTarget:
    """The object a policy decision is about.

    Class-level checks (``view-any``, ``create``) use a target without an id.

    Attributes:
        kind: Which policy applies
        id: Primary key of the concrete row, if any
        slug: Role slug, for logging
        is_system: Whether a role target is system-protected
    """

    kind: ResourceKind
    id: int | None = None
    slug: str | None = None
    is_system: bool = False

    @classmethod
    def for_role(cls, role: "Role | None" = None) -> "PolicyTarget":
        if role is None:
            return cls(kind=ResourceKind.ROLE)
        return cls(
            kind=ResourceKind.ROLE,
            id=role.id,
            slug=role.slug,
            is_system=bool(role.is_system),
        )

    @classmethod
    def for_user(cls, user: "User | None" = None) -> "PolicyTarget":
        if user is None:
            return cls(kind=ResourceKind.USER)
        return cls(kind=ResourceKind.USER, id=user.id)


def evaluate_policy(
    action: PolicyAction,
    target: PolicyTarget,
    permissions: frozenset[str],
) -> bool:
    """Evaluate a resource policy against a permission set.

    Args:
        action: The requested action
        target: The object acted upon
        permissions: Permission slugs held by the subject

    Returns:
        True if the policy allows the action
    """
    match (target.kind, action):
        case (
            ResourceKind.ROLE,
            PolicyAction.DELETE | PolicyAction.RESTORE | PolicyAction.FORCE_DELETE,
        ):
            return MANAGE_ROLES in permissions and not target.is_system
        case (ResourceKind.ROLE, _):
            return MANAGE_ROLES in permissions
        case (ResourceKind.USER, _):
            return MANAGE_USERS in permissions
    return False
