"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment."""

    # Backend API
    SITECRAFT_API_URL: str = "http://localhost:3005"
    API_TIMEOUT: float = 120.0
    ACCOUNT_DELETE_TIMEOUT: float = 10.0

    # Report language sent with report/PDF requests
    LANGUAGE: str = "en"

    # Results polling
    POLL_INTERVAL: float = 5.0
    POLL_MAX_ATTEMPTS: int = 60

    # Session cache (memory, file or redis)
    SESSION_STORE: str = "memory"
    SESSION_STORE_PATH: Optional[str] = None
    SESSION_NAMESPACE: str = "sitecraft"
    SESSION_TTL: int = 86400
    REDIS_URL: str = "redis://localhost:6379/0"

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
