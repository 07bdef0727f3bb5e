"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage Configuration
    data_dir: str = Field(
        default="data",
        description="Directory holding the JSON key-value store files"
    )

    # Retry Configuration
    storage_retry_attempts: int = Field(
        default=3,
        description="Maximum number of attempts for a raw storage read or write"
    )
    storage_retry_multiplier: float = Field(
        default=0.1,
        description="Multiplier for exponential backoff between storage retries"
    )
    storage_retry_max_wait: float = Field(
        default=1.0,
        description="Maximum wait time in seconds between storage retries"
    )

    # Bloom Defaults (seed values for the stored app settings record)
    default_maturity_period_days: int = Field(
        default=26,
        description="Days from bloom to expected harvest for new bloom entries"
    )
    max_maturity_period_days: int = Field(
        default=365,
        description="Longest maturity period accepted for new or corrected entries"
    )
    default_variety: str = Field(
        default="Red",
        description="Variety preselected for new bloom entries"
    )

    # Forecasting Parameters
    forecast_upcoming_limit: int = Field(
        default=10,
        description="Maximum number of upcoming forecasts shown in the harvest sections"
    )
    projection_days: int = Field(
        default=7,
        description="Number of days covered by the daily harvest projection"
    )

    # Dashboard Parameters
    dashboard_upcoming_window_days: int = Field(
        default=7,
        description="Days ahead (inclusive) counted as upcoming harvests"
    )
    dashboard_upcoming_limit: int = Field(
        default=5,
        description="Maximum number of upcoming harvests listed on the dashboard"
    )
    ready_today_includes_depleted: bool = Field(
        default=True,
        description="Count blooms with no remaining fruit in readyToHarvestToday"
    )

    # Analytics Parameters
    analytics_top_locations: int = Field(
        default=10,
        description="Number of locations returned by the abortion-rate ranking"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether per-client rate limiting is enforced"
    )
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Dragon Fruit Bloom Tracker",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
