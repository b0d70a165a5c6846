from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"

    # Infra
    database_url: str = "postgresql://app:app@db:5432/app"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    smtp_base_url: str = "http://smtp-mock:8025"
    http_timeout_seconds: float = 10.0

    # Certification flow
    certification_base_url: str = "http://localhost:8080"
    verified_redirect_url: str = "http://localhost:3000"

    # Worker
    outbox_batch_size: int = 10
    outbox_poll_interval_ms: int = 500
    outbox_retry_base_seconds: int = 2
    outbox_retry_max_delay_seconds: int = 300
    outbox_max_attempts: int = 8
    outbox_processing_lease_seconds: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
