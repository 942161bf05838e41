from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings, loaded from environment variables.

    Provides typed configuration for encoding, transport and logging.
    """

    # Encoding
    ENVELOPE_JSON_INDENT: int | None = None  # None emits compact JSON

    # Transport
    MAX_BODY_BYTES: int = 10 * 1024 * 1024
    REQUEST_ID_HEADER: str = "X-Request-ID"

    LOG_LEVEL: str = "info"

    # Log file output and rotation
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/jsonenvelope.log"
    LOG_ROTATION_POLICY: str = "time"  # "time" or "size"
    LOG_ROTATION_WHEN: str = "D"  # for TimedRotatingFileHandler
    LOG_ROTATION_INTERVAL: int = 1
    LOG_BACKUP_COUNT: int = 7
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # for size based rotation

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
