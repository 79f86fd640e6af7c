"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Recovery & Readiness Modeling Engine"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["Liftready contributors"]

    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./readiness.db"
    DATABASE_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    # Engine
    MODEL_CACHE_TTL_SECONDS: int = 300
    DEFAULT_BASELINE_WEIGHT: float = 135.0
    HISTORY_LOOKBACK_DAYS: int = 90

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
