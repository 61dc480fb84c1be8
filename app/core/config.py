import logging
import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_version() -> str:
    """Read version from pyproject.toml or environment variable."""
    # First check environment variable (for Docker/CI overrides)
    if env_version := os.getenv("APP_VERSION"):
        return env_version

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        for line in pyproject_path.read_text().split("\n"):
            if line.startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    return "0.0.0-dev"


# Application version - read from env var, pyproject.toml, or default to dev
APP_VERSION = _get_version()


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Boilerplate API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 3033
    API_PREFIX: str = "/api"

    # Comma-separated list of allowed origins, "*" allows any origin
    CORS_ORIGINS: str = "*"

    # API key expected in the X-API-Key header of guarded routes
    SERVER_API_KEY: str | None = None

    # Telegram alerting (both values required, otherwise alerts are skipped)
    TELEGRAM_BOT_TOKEN: str | None = None
    TELEGRAM_CHAT_ID: str | None = None
    ALERT_TIMEOUT_SECONDS: float = 10.0

    # Upper bound for each alert / persistence task spawned by the logger
    LOG_FANOUT_TIMEOUT_SECONDS: float = 15.0

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "boilerplate"
    POSTGRES_PASSWORD: str = "devpassword"
    POSTGRES_DB: str = "boilerplate"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    @property
    def DATABASE_URL(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def DATABASE_URL_SYNC(self) -> str:
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize LOG_LEVEL and reject names the logging module does not know."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL (got {v!r})"
            )
        return level

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
