"""Route guards built on the gate.

These run as FastAPI dependencies, so they are resolved before the request
body is used and before any service touches storage.
"""

from collections.abc import Awaitable, Callable

from staffdesk.core.auth.dependencies import CurrentUser
from staffdesk.core.permissions.gate import GateDep
from staffdesk.core.permissions.policies import (
    PolicyAction,
    PolicyTarget,
    ResourceKind,
)


def require_permission(ability: str) -> Callable[..., Awaitable[None]]:
    """Build a dependency that requires an ability.

    Usage:
        router = APIRouter(dependencies=[Depends(require_permission("manage-users"))])

    Args:
        ability: Permission slug to require

    Returns:
        Dependency raising ForbiddenError when the gate denies
    """

    async def dependency(current_user: CurrentUser, gate: GateDep) -> None:
        await gate.authorize(current_user, ability)

    dependency.__name__ = f"require_{ability.replace('-', '_')}"
    return dependency


def authorize_resource(
    action: PolicyAction, kind: ResourceKind
) -> Callable[..., Awaitable[None]]:
    """Build a dependency running a class-level policy check.

    For actions that are not about one row (``view-any``, ``create``).

    Args:
        action: The policy action
        kind: The resource kind whose policy applies

    Returns:
        Dependency raising ForbiddenError when the policy denies
    """

    async def dependency(current_user: CurrentUser, gate: GateDep) -> None:
        await gate.authorize(current_user, action, PolicyTarget(kind=kind))

    dependency.__name__ = f"authorize_{kind.value}_{action.value.replace('-', '_')}"
    return dependency
