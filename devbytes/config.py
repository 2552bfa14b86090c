"""Configuration management for the DevBytes playlist cache."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="DEVBYTES_", extra="ignore"
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./devbytes.db"

    # Redis (periodic work registrations)
    redis_url: str = "redis://localhost:6379/0"

    # Remote playlist
    playlist_url: str = "https://android-kotlin-fun-mars-server.appspot.com/devbytes"
    http_timeout_seconds: float = Field(default=15, gt=0)

    # Recurring refresh
    refresh_interval_seconds: int = Field(default=86400, gt=0)  # 1 day
    refresh_retry_backoff_seconds: int = Field(default=30, gt=0)
    constraint_poll_seconds: int = Field(default=900, gt=0)

    # CORS
    frontend_origin: str = "http://localhost:5173"

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
