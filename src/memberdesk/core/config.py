"""Configuration management for MemberDesk.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MEMBERDESK_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "MemberDesk"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./md_data/memberdesk.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Identity Service Settings
    identity_backend: Literal["local", "hosted"] = Field(
        default="local",
        description="Where account identities live: the local database or a hosted auth API",
    )
    identity_url: str = Field(
        default="http://localhost:54321",
        description="Base URL of the hosted identity service (without /auth/v1)",
    )
    identity_api_key: str = Field(
        default="",
        description="Public API key sent with every hosted identity request",
    )
    identity_service_key: str = Field(
        default="",
        description="Service-role key for hosted admin operations (password resets)",
    )
    identity_timeout_seconds: float = 10.0

    # Token Settings
    jwt_secret: str = Field(
        default="change-me-in-production-use-openssl-rand-hex-32",
        description="Secret used to sign and verify identity access tokens",
    )
    jwt_audience: str = "authenticated"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Member Identity Settings
    placeholder_email_domain: str = Field(
        default="temp.memberdesk.local",
        description="Domain used to synthesize emails for members identified by number",
    )
    max_failed_login_attempts: int = 5
    lockout_minutes: int = 30
    password_min_length: int = 8

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("placeholder_email_domain")
    @classmethod
    def validate_placeholder_domain(cls, v: str) -> str:
        """Normalize the placeholder domain and reject obviously broken values."""
        domain = v.strip().lstrip("@").lower()
        if not domain or "." not in domain or "@" in domain:
            raise ValueError(f"Invalid placeholder email domain: {v!r}")
        return domain

    @field_validator("identity_url")
    @classmethod
    def strip_identity_url(cls, v: str) -> str:
        """Drop trailing slashes so endpoint paths can be appended."""
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @model_validator(mode="after")
    def validate_hosted_identity(self) -> "Settings":
        """Require an API key when the hosted identity backend is selected."""
        if self.identity_backend == "hosted" and not self.identity_api_key:
            raise ValueError(
                "MEMBERDESK_IDENTITY_API_KEY is required when identity_backend is 'hosted'"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
