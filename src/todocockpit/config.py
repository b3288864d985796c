"""Configuration management for ToDo Cockpit."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="TODOCOCKPIT_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "ToDo Cockpit"
    debug: bool = False

    # Paths
    data_dir: Path = Path("data")

    # Database
    database_url: str = "sqlite+aiosqlite:///data/todocockpit.db"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Business rules
    max_categories: int = 5  # Maximum number of categories that may exist at once

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    # Rate limiting (requests per minute)
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"  # Applied to mutating endpoints

    # CORS (Cross-Origin Resource Sharing)
    cors_enabled: bool = True
    cors_allow_origins: list[str] = []  # Empty = same-origin only; use ["*"] for any origin
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_max_age: int = 600  # Preflight cache duration in seconds

    def setup_directories(self) -> None:
        """Ensure required directories exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.setup_directories()
    return settings
