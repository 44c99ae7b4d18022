"""Detection of whether the access control tables exist yet.

A deployment that has not run its migrations must deny every ability
instead of crashing. Only a positive answer is remembered, because the
tables can appear while the process is running.
"""

from typing import ClassVar

import structlog
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staffdesk.core.constants import ACCESS_CONTROL_TABLES


logger = structlog.get_logger()


class AccessControlTables:
    """Process-wide memo of a successful provisioning probe."""

    available: ClassVar[bool] = False

    @classmethod
    def reset(cls) -> None:
        """Forget a previous positive probe (used by tests and migrations)."""
        cls.available = False


async def access_control_provisioned(session: AsyncSession) -> bool:
    """Report whether every access control table exists.

    Storage errors raised while probing are logged and treated as "not
    provisioned" so callers fail closed.

    Args:
        session: Session whose connection is inspected

    Returns:
        True once users, roles, permissions and both join tables exist
    """
    if AccessControlTables.available:
        return True

    try:
        connection = await session.connection()
        table_names = await connection.run_sync(
            lambda sync_conn: set(inspect(sync_conn).get_table_names())
        )
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(
            "access_control_probe_failed",
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return False

    missing = ACCESS_CONTROL_TABLES - table_names
    if missing:
        logger.warning(
            "access_control_tables_unavailable",
            missing=sorted(missing),
        )
        return False

    AccessControlTables.available = True
    return True
