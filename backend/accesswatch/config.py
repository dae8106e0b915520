from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "AccessWatch"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    DATABASE_URL: str = "sqlite+aiosqlite:///./accesswatch.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # PageSpeed Insights (accessibility category)
    PAGESPEED_API_KEY: str = ""
    PAGESPEED_TIMEOUT: int = 60
    PAGESPEED_STRATEGY: str = "desktop"

    # Retry/backoff for rate-limited scoring requests
    AUDIT_MAX_RETRIES: int = 3
    AUDIT_RETRY_BASE_DELAY_MS: int = 1000
    AUDIT_RETRY_MAX_DELAY_MS: int = 30000

    # How often the beat schedule triggers a scheduler pass
    SCHEDULER_INTERVAL_MINUTES: int = 60

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def async_database_url(self) -> str:
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


settings = Settings()
