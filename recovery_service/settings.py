from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"

    # Infra
    database_url: str = "postgresql://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"
    smtp_base_url: str = "http://smtp-mock:8025"
    sms_base_url: str = "http://sms-mock:8026"
    redis_timeout_seconds: float = 2.0
    db_timeout_seconds: int = 5
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    # Security / policies
    bcrypt_rounds: int = 12
    code_ttl_seconds: int = 300
    code_length: int = 6
    code_attempts: int = 5
    token_secret: SecretStr = SecretStr("change-me")
    token_ttl_seconds: int = 600
    password_min_length: int = 8

    # Notifications
    notification_max_attempts: int = 3
    notification_retry_base_seconds: int = 1
    notification_retry_max_delay_seconds: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
