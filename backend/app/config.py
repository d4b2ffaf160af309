from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Staff Roster Approvals"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://roster:roster@db:5432/roster"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Action links
    public_base_url: str = "http://localhost:8000"
    approval_token_secret: str = "dev-approval-secret-change-me"

    # Email delivery
    email_provider: Literal["memory", "resend"] = "memory"
    resend_api_key: str | None = None
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "HR System <onboarding@resend.dev>"
    email_timeout_seconds: float = 10.0

    # Worker
    reconciliation_interval_seconds: int = 3600


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
