"""Notification tasks.

Jobs that email users about events on their account.
"""

import smtplib
from typing import Any

import structlog
from arq import Retry

from staffdesk.core.mail import build_welcome_message, send_mail
from staffdesk.modules.users.models import User


log = structlog.get_logger()

# Seconds to wait before the next attempt, multiplied by the attempt number
RETRY_BACKOFF_SECONDS = 30


async def send_welcome_notification(ctx: dict[str, Any], user_id: int) -> bool:
    """Email a newly created user their welcome message.

    The user may have been deleted between enqueueing and execution, in
    which case nothing is sent. SMTP failures are retried with a growing
    delay until the worker's ``max_tries`` is reached.

    Args:
        ctx: Worker context containing database session factory
        user_id: Id of the new user

    Returns:
        True if a message was sent, False if the user no longer exists

    Raises:
        Retry: If delivery failed and should be attempted again
    """
    session_factory = ctx["db_session_factory"]
    attempt = ctx.get("job_try", 1)

    async with session_factory() as session:
        user = await session.get(User, user_id)

    if user is None:
        log.info("welcome_notification_skipped", user_id=user_id, reason="user_missing")
        return False

    try:
        await send_mail(build_welcome_message(user))
    except (smtplib.SMTPException, OSError) as exc:
        log.warning(
            "welcome_notification_failed",
            user_id=user_id,
            attempt=attempt,
            error=str(exc),
        )
        raise Retry(defer=attempt * RETRY_BACKOFF_SECONDS) from exc

    log.info("welcome_notification_sent", user_id=user_id, attempt=attempt)
    return True
