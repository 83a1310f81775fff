"""Application configuration."""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Taskbell"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./data/taskbell.db"

    # Todos
    todo_page_size: int = 10
    todo_max_page_size: int = 100

    # Reminders
    reminder_threshold_minutes: int = 15
    reminder_poll_interval_seconds: float = 60.0
    reminder_poller_enabled: bool = False
    notification_list_limit: int = 100

    # Client
    api_base_url: str = "http://localhost:8000/api"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator(
        "reminder_threshold_minutes",
        "reminder_poll_interval_seconds",
        "notification_list_limit",
        "todo_page_size",
        "todo_max_page_size",
    )
    @classmethod
    def validate_positive(cls, value):
        """Reject zero or negative limits and intervals."""
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise the log level name."""
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
