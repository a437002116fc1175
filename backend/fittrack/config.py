"""
FitTrack - Configuration Management

Loads and validates environment variables for the API and the analytics
policies the service layer applies on top of the pure engine.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Settings
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT"
    )
    debug: bool = Field(
        default=True,
        alias="DEBUG"
    )
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL"
    )

    # Analytics Policy
    resting_burn_kcal: int = Field(
        default=1800,
        ge=0,
        alias="RESTING_BURN_KCAL",
        description="Estimated resting metabolic burn per day (kcal)"
    )
    auto_complete_goals: bool = Field(
        default=True,
        alias="AUTO_COMPLETE_GOALS",
        description="Complete a goal automatically when a progress update reaches its target"
    )
    deadline_warning_days: int = Field(
        default=7,
        ge=0,
        alias="DEADLINE_WARNING_DAYS",
        description="Horizon for goals considered near their deadline"
    )
    upcoming_reminder_hours: int = Field(
        default=24,
        ge=1,
        alias="UPCOMING_REMINDER_HOURS"
    )
    recent_items_limit: int = Field(default=5, ge=1, alias="RECENT_ITEMS_LIMIT")

    # API Settings
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    # CORS Settings (for frontend communication)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8081"],
        alias="CORS_ORIGINS"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def summary(self) -> dict[str, object]:
        """Non-secret settings worth logging at start-up."""
        return {
            "environment": self.environment,
            "resting_burn_kcal": self.resting_burn_kcal,
            "auto_complete_goals": self.auto_complete_goals,
            "deadline_warning_days": self.deadline_warning_days,
            "upcoming_reminder_hours": self.upcoming_reminder_hours,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
