from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List

class Settings(BaseSettings):
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "dermfinder"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    REDIS_URL: str = "redis://localhost:6379"
    SENTRY_DSN: str | None = None
    ENVIRONMENT: str = "production"
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "DermFinder Clinic API"
    LOG_LEVEL: str = "INFO"

    # Search
    SEARCH_CACHE_TTL: int = 300  # seconds
    DEFAULT_PER_PAGE: int = 500
    MAX_PER_PAGE: int = 5000
    UNIFIED_SEARCH_LIMIT: int = 50
    MAX_UNIFIED_SEARCH_LIMIT: int = 100
    FETCH_TIMEOUT_SECONDS: float | None = 10.0
    SESSION_CACHE_SIZE: int = 1000

    # Protection
    RATE_LIMIT: str = "100/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
