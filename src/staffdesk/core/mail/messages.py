"""Mail message builders."""

from email.message import EmailMessage
from email.utils import formataddr
from html import escape
from typing import TYPE_CHECKING

from staffdesk.config import settings


if TYPE_CHECKING:
    from staffdesk.modules.users.models import User


def _base_message(to_name: str, to_address: str, subject: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr((settings.mail_sender, settings.mail_from_address))
    message["To"] = formataddr((to_name, to_address))
    return message


def build_welcome_message(user: "User") -> EmailMessage:
    """Render the welcome mail sent after an account is created.

    Args:
        user: The new account

    Returns:
        A plain text message with an HTML alternative
    """
    dashboard_url = f"{settings.app_url.rstrip('/')}/dashboard"
    message = _base_message(user.name, user.email, f"Welcome to {settings.app_name}")

    message.set_content(
        "\n".join(
            [
                f"Welcome, {user.name}!",
                "",
                "Your account has been created successfully and is ready to use.",
                "",
                f"Open Dashboard: {dashboard_url}",
                "",
                "If you did not expect this account, please contact support.",
                "",
                "Regards,",
                settings.app_name,
            ]
        )
    )
    message.add_alternative(
        f"""\
<html>
  <body>
    <h1>Welcome, {escape(user.name)}!</h1>
    <p>Your account has been created successfully and is ready to use.</p>
    <p><a href="{escape(dashboard_url)}">Open Dashboard</a></p>
    <p>If you did not expect this account, please contact support.</p>
    <p>Regards,<br>{escape(settings.app_name)}</p>
  </body>
</html>
""",
        subtype="html",
    )
    return message
