from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./tripscore.db"

    # Media service (representative images for places)
    MEDIA_API_URL: Optional[str] = None
    MEDIA_API_KEY: Optional[str] = None
    MEDIA_TIMEOUT_SECONDS: float = 5.0
    MEDIA_MAX_CONCURRENCY: int = 8

    # TripScore Configuration
    CLUSTER_PRECISION: int = 2  # decimal places, 2 ~= 1.1km cells
    VISIT_FETCH_LIMIT: int = 1000
    ANALYTICS_FETCH_LIMIT: int = 10000

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
