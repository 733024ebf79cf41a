from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.db.enums import Environment

LOCAL_ENVIRONMENTS = {Environment.LOCAL, Environment.TEST}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "PlayerStats"
    database_url: str = Field(..., alias="DATABASE_URL")
    debug: bool = Field(False, alias="DEBUG")
    environment: Environment = Field(Environment.PRODUCTION, alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # batches rapid successive refresh triggers outside local environments
    stats_update_delay_seconds: float = Field(10.0, alias="STATS_UPDATE_DELAY_SECONDS")

    task_poll_interval_seconds: float = Field(1.0, alias="TASK_POLL_INTERVAL_SECONDS")
    task_lease_seconds: int = Field(300, alias="TASK_LEASE_SECONDS")
    task_max_attempts: int = Field(10, alias="TASK_MAX_ATTEMPTS")
    task_retry_base_seconds: int = Field(5, alias="TASK_RETRY_BASE_SECONDS")
    task_retry_max_seconds: int = Field(3600, alias="TASK_RETRY_MAX_SECONDS")

    @property
    def is_local(self) -> bool:
        return self.environment in LOCAL_ENVIRONMENTS


@lru_cache
def get_settings() -> Settings:
    return Settings()
