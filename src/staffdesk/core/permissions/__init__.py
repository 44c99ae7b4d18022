"""Role-based access control: models, gate, policies and route guards."""

from staffdesk.core.permissions.gate import Gate, GateDep, Grants
from staffdesk.core.permissions.models import (
    Permission,
    Role,
    role_permissions,
    user_roles,
)
from staffdesk.core.permissions.policies import (
    PolicyAction,
    PolicyTarget,
    ResourceKind,
    evaluate_policy,
)
from staffdesk.core.permissions.provisioning import (
    AccessControlTables,
    access_control_provisioned,
)


__all__ = [
    "AccessControlTables",
    # Gate
    "Gate",
    "GateDep",
    "Grants",
    # Models
    "Permission",
    # Policies
    "PolicyAction",
    "PolicyTarget",
    "ResourceKind",
    "Role",
    "access_control_provisioned",
    "evaluate_policy",
    "role_permissions",
    "user_roles",
]
