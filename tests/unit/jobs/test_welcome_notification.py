"""Tests for the welcome notification job."""

import smtplib
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from arq import Retry
from sqlalchemy.ext.asyncio import AsyncEngine

from staffdesk.core.constants import JOB_MAX_TRIES, WELCOME_NOTIFICATION_JOB
from staffdesk.core.database import build_session_factory
from staffdesk.core.jobs import registry
from staffdesk.core.jobs.tasks.notifications import send_welcome_notification
from staffdesk.core.jobs.worker import WorkerSettings


pytestmark = pytest.mark.unit


@pytest.fixture
def worker_ctx(engine: AsyncEngine) -> dict:
    return {"db_session_factory": build_session_factory(engine), "job_try": 1}


@pytest.fixture
def smtp() -> Generator[MagicMock, None, None]:
    with patch("staffdesk.core.mail.mailer.smtplib.SMTP") as smtp_class:
        yield smtp_class


class TestSendWelcomeNotification:
    """Tests for send_welcome_notification."""

    async def test_sends_mail_to_new_user(self, worker_ctx, smtp, make_user):
        user = await make_user("analyst", name="Ada Lovelace", email="ada@example.com")

        assert await send_welcome_notification(worker_ctx, user.id) is True

        connection = smtp.return_value.__enter__.return_value
        message = connection.send_message.call_args.args[0]
        assert message["To"] == "Ada Lovelace <ada@example.com>"
        assert message["Subject"] == "Welcome to Staff Desk"

    async def test_missing_user_is_skipped(self, worker_ctx, smtp):
        assert await send_welcome_notification(worker_ctx, 404) is False
        smtp.assert_not_called()

    async def test_transport_failure_is_retried_with_backoff(self, worker_ctx, smtp, make_user):
        user = await make_user()
        connection = smtp.return_value.__enter__.return_value
        connection.send_message.side_effect = smtplib.SMTPServerDisconnected("closed")
        worker_ctx["job_try"] = 2

        with pytest.raises(Retry) as exc_info:
            await send_welcome_notification(worker_ctx, user.id)

        assert exc_info.value.defer_score == 60_000

    async def test_unreachable_server_is_retried(self, worker_ctx, smtp, make_user):
        user = await make_user()
        smtp.side_effect = ConnectionRefusedError()

        with pytest.raises(Retry):
            await send_welcome_notification(worker_ctx, user.id)


class TestWorkerRegistration:
    """Tests for the worker settings."""

    def test_job_is_registered_with_bounded_retries(self):
        registered = {f.name: f for f in WorkerSettings.functions}

        assert registered[WELCOME_NOTIFICATION_JOB].max_tries == JOB_MAX_TRIES == 3


class TestEnqueue:
    """Tests for the enqueue helper."""

    async def test_requires_initialized_pool(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            await registry.enqueue(WELCOME_NOTIFICATION_JOB, 1)

    async def test_forwards_to_pool(self, monkeypatch):
        pool = AsyncMock()
        monkeypatch.setattr(registry.ArqPoolHolder, "pool", pool)

        await registry.enqueue(WELCOME_NOTIFICATION_JOB, 5)

        pool.enqueue_job.assert_awaited_once_with(
            WELCOME_NOTIFICATION_JOB, 5, _defer_by=None, _job_id=None
        )
