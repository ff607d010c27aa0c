from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod|test
    TZ: str = Field(default="Asia/Dubai")

    # DB
    DATABASE_URL: str = Field(default="postgresql+psycopg://app:app@db:5432/app")
    STATEMENT_TIMEOUT_MS: int = Field(default=8000)

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost")

    # Celery / Redis
    REDIS_URL: str = Field(default="redis://redis:6379/0")
    STATUS_REFRESH_MINUTES: int = Field(default=30)

    # Reconciliation
    FETCH_TIMEOUT_SEC: float = Field(default=8.0)
    FETCH_WORKERS: int = Field(default=3)
    STATUS_WRITEBACK: bool = Field(default=True)

    # Seed (dev)
    SEED_DEMO: bool = Field(default=True)


settings = Settings()
