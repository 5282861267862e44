"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = Field(default="talentflow", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    # API
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    allowed_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8000"],
        alias="ALLOWED_ORIGINS",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./talentflow.db", alias="DATABASE_URL"
    )
    seed_path: str | None = Field(default=None, alias="SEED_PATH")

    # Simulated network
    latency_min_ms: int = Field(default=200, ge=0, alias="LATENCY_MIN_MS")
    latency_max_ms: int = Field(default=1200, ge=0, alias="LATENCY_MAX_MS")
    failure_rate: float = Field(default=0.08, ge=0.0, le=1.0, alias="FAILURE_RATE")

    # Listings
    default_page_size: int = Field(default=10, ge=1, alias="DEFAULT_PAGE_SIZE")
    default_note_author: str = Field(
        default="user@company.com", alias="DEFAULT_NOTE_AUTHOR"
    )

    # Logging
    log_request_body: bool = Field(default=False, alias="LOG_REQUEST_BODY")
    log_response_body: bool = Field(default=False, alias="LOG_RESPONSE_BODY")
    log_max_body_size: int = Field(default=1024, alias="LOG_MAX_BODY_SIZE")
    json_logs: bool = Field(default=True, alias="JSON_LOGS")


# Global settings instance
settings = Settings()
