"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING)

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone name or UTC offset used for stored timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    notification_heartbeat_seconds: float = Field(
        default=30.0,
        description="Interval between liveness pulses written to idle streams",
        gt=0,
    )
    notification_stale_after_seconds: float = Field(
        default=90.0,
        description="Streams without a successful write for this long are reaped",
        gt=0,
    )
    notification_queue_size: int = Field(
        default=100,
        description="Maximum frames buffered per live connection before it is considered dead",
        gt=0,
    )
    notification_default_limit: int = Field(
        default=20, description="Default page size for notification listings", gt=0
    )
    notification_max_limit: int = Field(
        default=100, description="Upper bound applied to notification listings", gt=0
    )
    notification_poll_interval_seconds: float = Field(
        default=60.0,
        description="Polling interval used by clients that cannot stream",
        gt=0,
    )
    notification_reconnect_initial_seconds: float = Field(
        default=1.0, description="First reconnect delay used by clients", gt=0
    )
    notification_reconnect_max_seconds: float = Field(
        default=30.0, description="Cap applied to the client reconnect delay", gt=0
    )
    notification_reconnect_factor: float = Field(
        default=2.0, description="Multiplier applied after each failed attempt", ge=1
    )
    notification_stream_failures_before_polling: int = Field(
        default=5,
        description="Consecutive failed stream attempts before clients fall back to polling",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_notification_timing(self) -> "Settings":
        if self.notification_stale_after_seconds <= self.notification_heartbeat_seconds:
            raise ValueError(
                "NOTIFICATION_STALE_AFTER_SECONDS must be greater than NOTIFICATION_HEARTBEAT_SECONDS"
            )
        if self.notification_reconnect_max_seconds < self.notification_reconnect_initial_seconds:
            raise ValueError(
                "NOTIFICATION_RECONNECT_MAX_SECONDS must not be lower than "
                "NOTIFICATION_RECONNECT_INITIAL_SECONDS"
            )
        if self.notification_default_limit > self.notification_max_limit:
            raise ValueError(
                "NOTIFICATION_DEFAULT_LIMIT must not exceed NOTIFICATION_MAX_LIMIT"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
