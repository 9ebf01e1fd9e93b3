"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

# Get the base directory
BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_title: str = Field(default="Timeledger")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default=f"sqlite:///{BASE_DIR / 'timeledger.db'}",
        description="SQLAlchemy database URL"
    )

    # JWT Configuration
    jwt_secret_key: str = Field(default="development-secret-key-change-in-production", description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_token_expire_minutes: int = Field(default=60)

    # CORS
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:5173")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Timesheet rules
    hours_per_day: float = Field(default=8.0, gt=0, description="Hours that make up one day")
    default_display_unit: str = Field(default="hours", pattern="^(hours|days)$")
    max_daily_hours: float = Field(default=24.0, gt=0, description="Upper bound for the hours booked on one day")
    max_recurrence_days: int = Field(default=366, ge=1, description="Longest span a recurrence may cover")
    batch_mode: str = Field(default="sequential", pattern="^(sequential|concurrent)$")
    entry_cache_enabled: bool = Field(default=True)

    # Dashboard
    dashboard_window_days: int = Field(default=14, ge=1)
    dashboard_trend_days: int = Field(default=7, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept CORS origins as a comma-separated string or a list."""
        if v is None:
            return ",".join(DEFAULT_CORS_ORIGINS)
        if isinstance(v, (list, tuple)):
            return ",".join(str(origin).strip() for origin in v)
        return v

    @property
    def cors_origin_list(self) -> List[str]:
        """Get CORS origins as a list."""
        if not self.cors_origins.strip():
            return list(DEFAULT_CORS_ORIGINS)
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    @property
    def concurrent_batches(self) -> bool:
        return self.batch_mode == "concurrent"

    def validate_environment(self) -> None:
        """Validate that production secrets were overridden."""
        if self.jwt_secret_key.startswith("development-"):
            raise ValueError("Missing required environment variables: JWT_SECRET_KEY")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()

    return settings


# Create a global settings instance
settings = get_settings()
