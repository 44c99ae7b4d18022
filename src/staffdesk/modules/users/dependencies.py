"""User loading dependencies that also run the user policy."""

from collections.abc import Awaitable, Callable

from staffdesk.core.auth.dependencies import CurrentUser
from staffdesk.core.permissions.gate import GateDep
from staffdesk.core.permissions.policies import PolicyAction, PolicyTarget
from staffdesk.modules.users.models import User
from staffdesk.modules.users.services import UserSvc


def authorized_user(action: PolicyAction) -> Callable[..., Awaitable[User]]:
    """Build a dependency that loads ``user_id`` and authorizes ``action`` on it.

    Args:
        action: The policy action requested on the user

    Returns:
        Dependency resolving to the target user
    """

    async def dependency(
        user_id: int,
        current_user: CurrentUser,
        gate: GateDep,
        service: UserSvc,
    ) -> User:
        user = await service.get_user(user_id)
        await gate.authorize(current_user, action, PolicyTarget.for_user(user))
        return user

    dependency.__name__ = f"authorized_user_{action.value.replace('-', '_')}"
    return dependency
