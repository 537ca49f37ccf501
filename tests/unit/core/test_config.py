import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from memberdesk.core.config import Settings, get_settings


def test_settings_defaults():
    """Test that settings load with correct defaults."""
    settings = Settings()

    assert settings.app_name == "MemberDesk"
    assert settings.environment == "development"
    assert settings.identity_backend == "local"
    assert settings.placeholder_email_domain == "temp.memberdesk.local"
    assert settings.max_failed_login_attempts == 5
    assert settings.lockout_minutes == 30
    assert settings.password_min_length == 8
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_env_override():
    """Test that environment variables override defaults."""
    with patch.dict(os.environ, {
        "MEMBERDESK_ENVIRONMENT": "production",
        "MEMBERDESK_MAX_FAILED_LOGIN_ATTEMPTS": "3",
        "MEMBERDESK_PLACEHOLDER_EMAIL_DOMAIN": "temp.club.example",
    }):
        settings = Settings()

        assert settings.is_production is True
        assert settings.max_failed_login_attempts == 3
        assert settings.placeholder_email_domain == "temp.club.example"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_cors_origins_parsing():
    with patch.dict(os.environ, {
        "MEMBERDESK_CORS_ORIGINS": '["http://example.com", "http://test.com"]'
    }):
        settings = Settings()
        assert settings.cors_origins == ["http://example.com", "http://test.com"]

    settings = Settings(cors_origins="http://a.example, http://b.example")
    assert settings.cors_origins == ["http://a.example", "http://b.example"]


def test_placeholder_domain_is_normalized():
    settings = Settings(placeholder_email_domain="  @Temp.Club.Example ")
    assert settings.placeholder_email_domain == "temp.club.example"


@pytest.mark.parametrize("domain", ["", "localhost", "a@b.example"])
def test_placeholder_domain_rejects_invalid_values(domain):
    with pytest.raises(ValidationError):
        Settings(placeholder_email_domain=domain)


def test_identity_url_trailing_slash_is_stripped():
    settings = Settings(identity_url="https://auth.example.org/")
    assert settings.identity_url == "https://auth.example.org"


def test_hosted_backend_requires_api_key():
    with pytest.raises(ValidationError, match="IDENTITY_API_KEY"):
        Settings(identity_backend="hosted", identity_api_key="")

    settings = Settings(identity_backend="hosted", identity_api_key="anon-key")
    assert settings.identity_backend == "hosted"


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(workers=4, database_url="sqlite+aiosqlite:///./x.db")

    settings = Settings(workers=4, database_url="postgresql+asyncpg://u:p@db/memberdesk")
    assert settings.workers == 4
