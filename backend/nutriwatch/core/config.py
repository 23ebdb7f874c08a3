"""Module: config."""

from pydantic_settings import BaseSettings

# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    # Primary SQLAlchemy connection string for the backend database.
    database_url: str
    app_name: str = "nutriwatch"
    log_level: str = "INFO"
    # Frontend origins allowed by the CORS middleware.
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    # A scale/stadiometer reading older than this is reported as stale.
    sensor_ttl_seconds: float = 5.0
    # Rows returned in the dashboard's recent-records panel.
    recent_records_limit: int = 100

    # Configure pydantic-settings to also load values from local .env file.
    class Config:
        env_file = ".env"

# Global settings instance imported by app modules at runtime.
settings = Settings()
