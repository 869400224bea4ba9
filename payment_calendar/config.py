"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./payment_calendar.db"

    # Service
    service_name: str = "payment-calendar"
    log_level: str = "INFO"

    # Schedule projection
    max_schedule_iterations: int = 10_000
    horizon_years_ahead: int = 1  # Bill projections run to Dec 31 of (viewed year + N)
    max_calendar_days: int = 732  # Per-day calendar payload; totals endpoints are not limited

    # Ownership
    owner_header: str = "X-User-ID"


settings = Settings()
