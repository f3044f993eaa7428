"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "credit-ledger"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    storage_backend: Literal["database", "memory"] = "database"
    database_url: str = "sqlite+aiosqlite:///./credit_ledger.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    storage_key: str = Field(default="credit_ledger", min_length=1)

    # Approval handshake
    approval_code_digits: int = Field(default=6, ge=4, le=10)
    approval_code_ttl_seconds: int = Field(default=300, gt=0)
    approval_max_attempts: int = Field(default=3, ge=1)
    # Return the code to the seller for simulated on-device approval
    approval_expose_code: bool = True

    # Notification gateway (unset = log the code locally)
    notification_gateway_url: str | None = None
    notification_timeout: float = 5.0
    notification_max_retries: int = 3

    # Admin
    admin_removal_enabled: bool = False

    # Metrics
    metrics_enabled: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
