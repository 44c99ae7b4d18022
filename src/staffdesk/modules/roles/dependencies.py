"""Role loading dependencies that also run the role policy."""

from collections.abc import Awaitable, Callable

from staffdesk.core.auth.dependencies import CurrentUser
from staffdesk.core.permissions.gate import GateDep
from staffdesk.core.permissions.models import Role
from staffdesk.core.permissions.policies import PolicyAction, PolicyTarget
from staffdesk.modules.roles.services import RoleSvc


def authorized_role(action: PolicyAction) -> Callable[..., Awaitable[Role]]:
    """Build a dependency that loads ``role_id`` and authorizes ``action`` on it.

    An unknown id is a 404 before any policy runs.

    Args:
        action: The policy action requested on the role

    Returns:
        Dependency resolving to the role
    """

    async def dependency(
        role_id: int,
        current_user: CurrentUser,
        gate: GateDep,
        service: RoleSvc,
    ) -> Role:
        role = await service.get_role(role_id)
        await gate.authorize(current_user, action, PolicyTarget.for_role(role))
        return role

    dependency.__name__ = f"authorized_role_{action.value.replace('-', '_')}"
    return dependency
