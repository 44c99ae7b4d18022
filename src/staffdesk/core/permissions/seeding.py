"""Starter permissions, system roles and demo accounts.

Both seeders are idempotent: permissions and roles are matched by slug and
updated in place, and demo users by email.
"""

import secrets

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffdesk.core.auth.backend import hash_password
from staffdesk.core.constants import (
    MANAGE_ROLES,
    MANAGE_SETTINGS,
    MANAGE_USERS,
    SUPER_ADMIN_ROLE,
    VIEW_DASHBOARD,
)
from staffdesk.core.permissions.models import Permission, Role


logger = structlog.get_logger()

ADMIN_ROLE = "admin"
ANALYST_ROLE = "analyst"

DEMO_EMAIL = "test@example.com"
DEMO_PASSWORD = "password"
DEMO_USER_TARGET = 5

PERMISSIONS: list[dict[str, str]] = [
    {
        "name": "View Dashboard",
        "slug": VIEW_DASHBOARD,
        "description": "View admin dashboard analytics and summaries.",
    },
    {
        "name": "Manage Users",
        "slug": MANAGE_USERS,
        "description": "Create, edit, and remove user accounts.",
    },
    {
        "name": "Manage Roles",
        "slug": MANAGE_ROLES,
        "description": "Create, edit, and assign role permissions.",
    },
    {
        "name": "Manage Settings",
        "slug": MANAGE_SETTINGS,
        "description": "Manage privileged settings and preferences.",
    },
]

# None grants every seeded permission
SYSTEM_ROLES: list[tuple[dict[str, str], list[str] | None]] = [
    (
        {
            "name": "Super Admin",
            "slug": SUPER_ADMIN_ROLE,
            "description": "Unrestricted platform access.",
        },
        None,
    ),
    (
        {
            "name": "Admin",
            "slug": ADMIN_ROLE,
            "description": "Administrative access for user and role operations.",
        },
        [VIEW_DASHBOARD, MANAGE_USERS, MANAGE_ROLES],
    ),
    (
        {
            "name": "Analyst",
            "slug": ANALYST_ROLE,
            "description": "Read-only dashboard access.",
        },
        [VIEW_DASHBOARD],
    ),
]


async def _upsert_permission(session: AsyncSession, payload: dict[str, str]) -> Permission:
    result = await session.execute(
        select(Permission).where(Permission.slug == payload["slug"])
    )
    permission = result.scalar_one_or_none()
    if permission is None:
        permission = Permission(**payload)
        session.add(permission)
    else:
        permission.name = payload["name"]
        permission.description = payload["description"]
    return permission


async def _upsert_role(session: AsyncSession, payload: dict[str, str]) -> Role:
    result = await session.execute(select(Role).where(Role.slug == payload["slug"]))
    role = result.scalar_one_or_none()
    if role is None:
        role = Role(**payload, is_system=True)
        session.add(role)
    else:
        role.name = payload["name"]
        role.description = payload["description"]
        role.is_system = True
    return role


async def seed_access_control(session: AsyncSession) -> dict[str, Role]:
    """Create or refresh the starter permissions and system roles.

    Each system role's permission set is synced to the starter bundle. The
    oldest user then receives ``super-admin`` and every user without a role
    receives ``analyst``.

    Args:
        session: Session to write through; the caller commits

    Returns:
        The system roles keyed by slug
    """
    from staffdesk.modules.users.models import User  # noqa: PLC0415

    permissions = {
        payload["slug"]: await _upsert_permission(session, payload)
        for payload in PERMISSIONS
    }

    roles: dict[str, Role] = {}
    for payload, slugs in SYSTEM_ROLES:
        role = await _upsert_role(session, payload)
        granted = list(permissions) if slugs is None else slugs
        role.permissions = [permissions[slug] for slug in granted]
        roles[role.slug] = role
    await session.flush()

    oldest = (
        await session.execute(select(User).order_by(User.id).limit(1))
    ).scalar_one_or_none()
    if oldest is not None and roles[SUPER_ADMIN_ROLE] not in oldest.roles:
        oldest.roles.append(roles[SUPER_ADMIN_ROLE])

    roleless = (
        await session.execute(select(User).where(~User.roles.any()))
    ).scalars().all()
    for user in roleless:
        if user is not oldest:
            user.roles.append(roles[ANALYST_ROLE])
    await session.flush()

    logger.info(
        "access_control_seeded",
        permissions=len(permissions),
        roles=sorted(roles),
        super_admin_user_id=oldest.id if oldest else None,
        analysts_assigned=len([u for u in roleless if u is not oldest]),
    )
    return roles


async def seed_demo_users(session: AsyncSession) -> int:
    """Ensure the demo login exists and top the table up to five users.

    Args:
        session: Session to write through; the caller commits

    Returns:
        Number of users created
    """
    from staffdesk.modules.users.models import User  # noqa: PLC0415

    created = 0
    existing = await session.execute(select(User.id).where(User.email == DEMO_EMAIL))
    if existing.scalar_one_or_none() is None:
        session.add(
            User(name="Test User", email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
        )
        created += 1
        await session.flush()

    total = (await session.execute(select(func.count(User.id)))).scalar_one()
    for _ in range(max(0, DEMO_USER_TARGET - total)):
        token = secrets.token_hex(4)
        session.add(
            User(
                name=f"Demo User {token}",
                email=f"demo.{token}@example.com",
                password_hash=hash_password(DEMO_PASSWORD),
            )
        )
        created += 1
    await session.flush()

    logger.info("demo_users_seeded", created=created)
    return created
