"""Authorization gate.

The gate answers "may this user perform this ability?", optionally about a
specific target. Evaluation order:

1. access control tables missing -> deny
2. user holds the ``super-admin`` role -> allow, before any policy
3. a target was given -> the resource policy decides
4. otherwise -> allow iff one of the user's roles carries the ability

Grants are read from the database once per gate (one gate per request) and
must be forgotten after the assignment graph changes.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

import structlog
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffdesk.api.dependencies import DBSession
from staffdesk.core.constants import CORE_ABILITIES, SUPER_ADMIN_ROLE
from staffdesk.core.errors import ForbiddenError
from staffdesk.core.observability.tracing import get_tracer
from staffdesk.core.permissions.models import (
    Permission,
    Role,
    role_permissions,
    user_roles,
)
from staffdesk.core.permissions.policies import (
    PolicyAction,
    PolicyTarget,
    evaluate_policy,
)
from staffdesk.core.permissions.provisioning import access_control_provisioned


if TYPE_CHECKING:
    from staffdesk.modules.users.models import User


logger = structlog.get_logger()
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class Grants:
    """Role and permission slugs held by one user."""

    roles: frozenset[str]
    permissions: frozenset[str]

    @property
    def is_super_admin(self) -> bool:
        return SUPER_ADMIN_ROLE in self.roles


NO_GRANTS = Grants(roles=frozenset(), permissions=frozenset())


class Gate:
    """Per-request authorization evaluator."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._grants: dict[int, Grants] = {}

    async def grants_for(self, user: "User") -> Grants:
        """Load (or return memoized) grants for a user.

        Args:
            user: The user whose roles are walked

        Returns:
            Role slugs and permission slugs reachable from the user
        """
        cached = self._grants.get(user.id)
        if cached is not None:
            return cached

        stmt = (
            select(Role.slug, Permission.slug)
            .select_from(user_roles)
            .join(Role, Role.id == user_roles.c.role_id)
            .outerjoin(role_permissions, role_permissions.c.role_id == Role.id)
            .outerjoin(Permission, Permission.id == role_permissions.c.permission_id)
            .where(user_roles.c.user_id == user.id)
        )
        rows = (await self.session.execute(stmt)).all()

        grants = Grants(
            roles=frozenset(role_slug for role_slug, _ in rows),
            permissions=frozenset(slug for _, slug in rows if slug is not None),
        )
        self._grants[user.id] = grants
        return grants

    def forget(self, user: "User | None" = None) -> None:
        """Drop memoized grants after roles or permissions change.

        Args:
            user: Forget only this user; forget everyone when omitted
        """
        if user is None:
            self._grants.clear()
        else:
            self._grants.pop(user.id, None)

    async def allows(
        self,
        user: "User",
        ability: str,
        target: PolicyTarget | None = None,
    ) -> bool:
        """Check whether ``user`` may perform ``ability``.

        Args:
            user: The acting user
            ability: A permission slug, or a PolicyAction when a target is given
            target: The object acted upon, if the check is about one

        Returns:
            True if allowed
        """
        with tracer.start_as_current_span("gate.allows") as span:
            span.set_attribute("authz.ability", str(ability))
            span.set_attribute("authz.user_id", user.id)

            allowed = await self._evaluate(user, ability, target)

            span.set_attribute("authz.allowed", allowed)
            return allowed

    async def _evaluate(
        self,
        user: "User",
        ability: str,
        target: PolicyTarget | None,
    ) -> bool:
        if not await access_control_provisioned(self.session):
            return False

        grants = await self.grants_for(user) if user.id is not None else NO_GRANTS

        if grants.is_super_admin:
            logger.warning(
                "super_admin_bypass",
                user_id=user.id,
                ability=str(ability),
                target_kind=target.kind.value if target else None,
                target_id=target.id if target else None,
            )
            return True

        if target is not None:
            return evaluate_policy(PolicyAction(ability), target, grants.permissions)

        return ability in grants.permissions

    async def denies(
        self,
        user: "User",
        ability: str,
        target: PolicyTarget | None = None,
    ) -> bool:
        return not await self.allows(user, ability, target)

    async def authorize(
        self,
        user: "User",
        ability: str,
        target: PolicyTarget | None = None,
    ) -> None:
        """Raise unless ``user`` may perform ``ability``.

        Raises:
            ForbiddenError: If the gate denies the request
        """
        if await self.allows(user, ability, target):
            return

        logger.info(
            "authorization_denied",
            user_id=user.id,
            ability=str(ability),
            target_kind=target.kind.value if target else None,
            target_id=target.id if target else None,
        )
        raise ForbiddenError(error_code="authorization_denied")

    async def abilities(self, user: "User") -> dict[str, bool]:
        """Evaluate every core ability for ``user``."""
        return {ability: await self.allows(user, ability) for ability in CORE_ABILITIES}


def get_gate(db: DBSession) -> Gate:
    """Dependency that provides the request's gate."""
    return Gate(db)


GateDep = Annotated[Gate, Depends(get_gate)]
