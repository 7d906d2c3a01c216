"""
Environment configuration for the school billing engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="School Billing", alias="PROJECT_NAME")
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    TIMEZONE: str = "America/Vancouver"
    CURRENCY: str = "USD"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./school_billing.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_POOL_OVERFLOW: int = 10

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    LOG_FILE: Optional[str] = None

    # Business policy
    ELIGIBILITY_WINDOW_DAYS: int = 35
    DUPLICATE_PAYMENT_WINDOW_MINUTES: int = 60

    @field_validator("CURRENCY")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Normalise the ISO 4217 currency code."""
        v = v.upper().strip()
        if len(v) != 3:
            raise ValueError("Currency code must be exactly 3 characters")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper().strip()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    @field_validator("ELIGIBILITY_WINDOW_DAYS", "DUPLICATE_PAYMENT_WINDOW_MINUTES")
    @classmethod
    def validate_positive_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Policy windows must be positive")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
