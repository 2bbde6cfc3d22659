"""Exporter configuration loaded from the environment."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the pool metrics exporter.

    Attributes:
        METRICS_NAMESPACE: Prefix for every metric name; empty drops the segment.
        METRICS_HOST: Bind address of the /metrics sidecar.
        METRICS_PORT: Port of the /metrics sidecar.
        LOG_LEVEL: Level applied to the ``pgx_exporter`` logger.
    """

    METRICS_NAMESPACE: str = ""
    METRICS_HOST: str = "0.0.0.0"
    METRICS_PORT: int = Field(default=9090, ge=1, le=65535)
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
