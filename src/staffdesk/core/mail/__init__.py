"""Outbound mail: message rendering and SMTP delivery."""

from staffdesk.core.mail.mailer import send_mail
from staffdesk.core.mail.messages import build_welcome_message


__all__ = [
    "build_welcome_message",
    "send_mail",
]
