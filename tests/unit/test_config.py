"""Tests for settings parsing."""

import pytest
from pydantic import ValidationError

from staffdesk.config import Settings
from staffdesk.core.constants import DEFAULT_INSECURE_SECRET


pytestmark = pytest.mark.unit

SECURE_SECRET = "x" * 40


class TestDatabaseUrl:
    """Tests for the async driver rewrite."""

    @pytest.mark.parametrize(
        "url",
        [
            "postgresql://app:pw@db:5432/staffdesk",
            "postgres://app:pw@db:5432/staffdesk",
        ],
    )
    def test_postgres_urls_use_asyncpg(self, url: str):
        settings = Settings(database_url=url, secret_key=SECURE_SECRET)

        assert settings.async_database_url == "postgresql+asyncpg://app:pw@db:5432/staffdesk"
        assert settings.is_sqlite is False

    def test_sqlite_passes_through(self):
        settings = Settings(database_url="sqlite+aiosqlite:///./dev.db", secret_key=SECURE_SECRET)

        assert settings.async_database_url == "sqlite+aiosqlite:///./dev.db"
        assert settings.is_sqlite is True


class TestSecretKey:
    """Tests for secret key validation."""

    def test_short_custom_secret_is_rejected(self):
        with pytest.raises(ValidationError, match="at least 32 characters"):
            Settings(secret_key="too-short")

    def test_insecure_default_is_refused_in_production(self):
        settings = Settings(environment="production", secret_key=DEFAULT_INSECURE_SECRET)

        with pytest.raises(ValueError, match="secure value in production"):
            _ = settings.is_production

    def test_production_with_real_secret(self):
        settings = Settings(environment="production", secret_key=SECURE_SECRET)

        assert settings.is_production is True
        assert settings.is_development is False


def test_admin_api_limits_default_to_sixty_and_two_forty():
    settings = Settings(secret_key=SECURE_SECRET)

    assert (settings.admin_api_user_limit, settings.admin_api_ip_limit) == (60, 240)
    assert settings.rate_limit_window == 60


def test_mail_sender_falls_back_to_app_name():
    assert Settings(secret_key=SECURE_SECRET, app_name="Ops").mail_sender == "Ops"
    assert Settings(secret_key=SECURE_SECRET, mail_from_name="Desk Bot").mail_sender == "Desk Bot"
