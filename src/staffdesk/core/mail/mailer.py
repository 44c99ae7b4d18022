"""SMTP delivery.

smtplib is blocking, so delivery runs in a worker thread to keep the
event loop free.
"""

import asyncio
import smtplib
from email.message import EmailMessage

import structlog

from staffdesk.config import settings


log = structlog.get_logger()


def _deliver(message: EmailMessage) -> None:
    with smtplib.SMTP(
        settings.mail_host,
        settings.mail_port,
        timeout=settings.mail_timeout,
    ) as smtp:
        if settings.mail_use_tls:
            smtp.starttls()
        if settings.mail_username:
            smtp.login(settings.mail_username, settings.mail_password or "")
        smtp.send_message(message)


async def send_mail(message: EmailMessage) -> None:
    """Send a message through the configured SMTP server.

    Args:
        message: Fully addressed message

    Raises:
        smtplib.SMTPException: If the server rejects the message
        OSError: If the server cannot be reached
    """
    await asyncio.to_thread(_deliver, message)
    log.debug("mail_sent", to=message["To"], subject=message["Subject"])
