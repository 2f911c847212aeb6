"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_env: str = "development"
    app_debug: bool = False
    api_url: str = "http://localhost:8000"
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://localhost:5432/codehealth"
    database_pool_size: int = 10

    # Celery
    celery_broker_url: str = "redis://localhost:6379/1"
    celery_result_backend: str = "redis://localhost:6379/2"

    # GitHub
    github_api_url: str = "https://api.github.com"
    github_token: str | None = None
    github_timeout_seconds: float = 30.0

    # Analysis limits
    analysis_max_files: int = 5000
    analysis_max_file_size: int = 100_000  # 100KB per fetched file
    analysis_max_content_files: int = 60
    analysis_fetch_concurrency: int = 8
    analysis_timeout_seconds: float = 120.0

    # JWT (tokens are issued by the hosted auth provider)
    jwt_secret: str = ""  # Required - no insecure default
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    jwt_expiry_hours: int = 24

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    @field_validator("jwt_secret", mode="after")
    @classmethod
    def validate_secrets(cls, v: str, info) -> str:
        """Ensure secrets are set and not using insecure defaults."""
        insecure_values = {"", "change-me-in-production", "secret", "password"}
        if v.lower() in insecure_values:
            raise ValueError(
                f"{info.field_name} must be set to a secure value via environment variable. "
                f"Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )
        if len(v) < 32:
            raise ValueError(f"{info.field_name} must be at least 32 characters long")
        return v

    @field_validator("analysis_fetch_concurrency", "analysis_max_files", mode="after")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    level = logging.DEBUG if settings.app_debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
