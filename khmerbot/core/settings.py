"""Application settings management."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global settings loaded from environment variables."""

    app_name: str = "Khmer Telegram Bot"
    app_version: str = "0.1.0"
    environment: str = "development"
    default_language: str = Field(default="km", alias="DEFAULT_LANGUAGE")

    bot_token: str | None = Field(default=None, alias="BOT_TOKEN")
    telegram_api_url: str = Field(default="https://api.telegram.org", alias="TELEGRAM_API_URL")
    connection_mode: Literal["polling", "webhook"] = Field(default="polling", alias="BOT_MODE")

    polling_timeout: int = Field(default=30, alias="POLLING_TIMEOUT")
    polling_limit: int = Field(default=100, alias="POLLING_LIMIT")
    polling_retry_count: int = Field(default=5, alias="POLLING_RETRY_COUNT")
    polling_interval: float = Field(default=0.3, alias="POLLING_INTERVAL")

    webhook_port: int = Field(default=8443, alias="PORT")
    webhook_host: str = Field(default="0.0.0.0", alias="HOST")
    webhook_path: str = Field(default="/webhook/telegram", alias="WEBHOOK_PATH")
    webhook_url: str | None = Field(default=None, alias="WEBHOOK_URL")
    webhook_max_connections: int = Field(default=40, alias="WEBHOOK_MAX_CONNECTIONS")

    data_dir: str = Field(default="./data", alias="DATA_DIR")
    flush_interval_ms: int = Field(default=300_000, alias="FLUSH_INTERVAL")
    write_through: bool = Field(default=True, alias="WRITE_THROUGH")
    conversation_timeout_minutes: int = Field(default=30, alias="CONVERSATION_TIMEOUT_MINUTES")
    lock_dir: str = Field(default=".", alias="LOCK_DIR")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="./logs", alias="LOG_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def use_webhook(self) -> bool:
        """Webhook mode needs a public URL; without one the bot polls."""
        return self.connection_mode == "webhook" and bool(self.webhook_url)


settings = Settings()
