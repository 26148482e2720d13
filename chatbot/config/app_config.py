"""Process-level settings: environment name and logging.

Values come from environment variables or a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class AppConfig(BaseSettings):
    """Application configuration settings."""

    # Environment
    app_env: str = Field("development")
    app_debug: bool = Field(False)

    # Logging; chat output goes to stdout so logs stay quiet by default
    log_level: str = Field("WARNING")
    log_file: Optional[str] = Field(None)

    @field_validator("app_env")
    def validate_app_env(cls, value: str) -> str:
        if value not in ["development", "staging", "production"]:
            raise ValueError("APP_ENV must be development, staging, or production")
        return value

    @field_validator("log_level")
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("LOG_LEVEL must be a valid Loguru level")
        return level

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache()
def get_app_config() -> AppConfig:
    """Return a cached application configuration instance."""

    return AppConfig()
