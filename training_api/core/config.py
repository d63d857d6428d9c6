"""
Configuration management for the Training API proxy.
Handles environment variables and application settings for the upstream proxy and profile storage.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Training API"
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    API_PREFIX: str = "/api/training"

    # Database - PostgreSQL
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "training"
    DB_ECHO: bool = False

    # Full SQLAlchemy URL, takes priority over the DB_* parts when set
    DATABASE_URL: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "DEBUG"
    LOG_FORMAT: str = "console"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of {allowed_envs}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format setting."""
        allowed_formats = ["console", "json"]
        if v not in allowed_formats:
            raise ValueError(f"Log format must be one of {allowed_formats}")
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_api_prefix(cls, v):
        """Strip the trailing slash so routes join cleanly."""
        return v.rstrip("/")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Create global settings instance
settings = Settings()


def get_database_url(config: Optional[Settings] = None) -> str:
    """
    Get the SQLAlchemy database URL.

    Args:
        config: Settings to read from, defaults to the global settings

    Returns:
        str: Async driver connection URL
    """
    config = config or settings

    # Use DATABASE_URL from environment if available
    if config.DATABASE_URL:
        return config.DATABASE_URL

    return (
        f"postgresql+asyncpg://{config.DB_USER}:{config.DB_PASSWORD}"
        f"@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"
    )


def is_production(config: Optional[Settings] = None) -> bool:
    """Check if running in production environment."""
    return (config or settings).ENVIRONMENT == "production"
