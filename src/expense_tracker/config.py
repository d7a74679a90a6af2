"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    # Database
    database_url: str = "sqlite+aiosqlite:///./expense_tracker.db"
    db_echo: bool = False
    auto_create_tables: bool = True

    # JWT (SECRET_KEY is accepted for older deployments)
    jwt_secret: str = Field(validation_alias=AliasChoices("jwt_secret", "secret_key"))
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "expense-tracker-api"
    jwt_audience: str = "expense-tracker-clients"
    jwt_expire_minutes: int = 60 * 24

    # Users
    password_min_length: int = 8

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
