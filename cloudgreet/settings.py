"""Application settings using Pydantic BaseSettings."""

import re

from pydantic_settings import BaseSettings, SettingsConfigDict


def to_async_database_url(url: str) -> str:
    """Convert a database URL for the asyncpg driver."""
    # Convert postgres:// to postgresql+asyncpg:// for SQLAlchemy async
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    # asyncpg doesn't support sslmode, it uses ssl parameter
    if "sslmode=" in url:
        url = re.sub(r'[?&]sslmode=[^&]*', '', url)
        url = url.rstrip('?&')
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Postgres (Supabase)
    database_url: str = "sqlite+aiosqlite:///./cloudgreet.db"

    # Redis (optional, used for webhook de-duplication)
    redis_url: str = "redis://localhost:6379/0"
    redis_enabled: bool = False

    # Telnyx call control
    telnyx_api_key: str = ""
    telnyx_api_base: str = "https://api.telnyx.com/v2"
    telnyx_public_key: str | None = None  # base64 Ed25519 key from the portal
    webhook_tolerance_seconds: int = 300
    webhook_idempotency_ttl_seconds: int = 300

    # Internal endpoints (default to this service)
    app_base_url: str = "https://cloudgreet.com"
    conversation_endpoint_url: str | None = None
    notification_endpoint_url: str | None = None
    http_timeout_seconds: float = 30.0

    # LLM
    llm_mode: str = "openai"
    openai_api_key: str = ""
    openai_model: str = "gpt-4-turbo-preview"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_v1_prefix: str = "/api/v1"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def async_database_url(self) -> str:
        return to_async_database_url(self.database_url)

    @property
    def resolved_conversation_endpoint_url(self) -> str:
        if self.conversation_endpoint_url:
            return self.conversation_endpoint_url
        return f"{self.app_base_url.rstrip('/')}{self.api_v1_prefix}/ai/conversation-voice"

    @property
    def resolved_notification_endpoint_url(self) -> str:
        if self.notification_endpoint_url:
            return self.notification_endpoint_url
        return f"{self.app_base_url.rstrip('/')}{self.api_v1_prefix}/notifications/send"


settings = Settings()
