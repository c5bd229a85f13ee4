"""Application configuration managed via environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Task Breakdown Expert"
    debug: bool = False
    log_level: str = "INFO"

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    llm_response_mode: Literal["json_object", "function_call"] = "json_object"
    llm_temperature: float = 0.7

    chunk_size: int = 8
    chunk_threshold: int = 8
    chunk_delay_seconds: float = 1.0
    max_plan_weeks: int = 52
    min_accepted_units: int = 4

    analytics_enabled: bool = True
    analytics_backend: Literal["file", "database"] = "file"
    analytics_database_url: str = "sqlite:///./analytics.db"

    log_path: str | None = None
    log_max_file_bytes: int = 20 * 1024 * 1024
    log_retention_days: int = 30

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "task-breakdown-expert"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
