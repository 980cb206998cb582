"""Configuration management for the FastAPI server.

This module handles configuration loading from environment variables and
credential files, providing sensible defaults for development and production.
"""

import logging
import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Project root (three levels up from this file: src/server/config.py)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Application configuration settings.

    Attributes:
        app_name: Application name
        version: Application version
        debug: Debug mode flag
        database_path: SQLite database file path
        finnhub_key_file: Finnhub API key file (relative to project root)
        price_cache_ttl: Seconds a fetched stock price stays fresh
        price_fetch_workers: Thread pool size for batch price lookups
        cors_origins: List of allowed CORS origins
        host: Server host address
        port: Server port number
    """

    model_config = SettingsConfigDict(env_prefix="TRACKER_", case_sensitive=False)

    app_name: str = "Options Tracker API"
    version: str = "1.0.0"
    debug: bool = False

    # Database configuration
    database_path: str = "~/.options_tracker/positions.db"

    # Price oracle configuration
    finnhub_key_file: str = "config/finnhub_api_key.txt"
    price_cache_ttl: int = 300
    price_fetch_workers: int = 8

    # CORS configuration - allow local development origins
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def database_url(self) -> str:
        """Get SQLAlchemy database URL.

        Returns:
            Database URL string for SQLAlchemy
        """
        expanded_path = os.path.expanduser(self.database_path)
        return f"sqlite:///{expanded_path}"

    def get_database_path(self) -> Path:
        """Get expanded database path as Path object.

        Returns:
            Resolved database file path
        """
        return Path(os.path.expanduser(self.database_path))


def _load_credentials() -> None:
    """Load the Finnhub API key from its config file into the environment.

    Leaves FINNHUB_API_KEY alone when it is already set, so the rest of the
    codebase can rely on os.environ alone.
    """
    if os.environ.get("FINNHUB_API_KEY"):
        return

    finnhub_path = PROJECT_ROOT / settings.finnhub_key_file
    if not finnhub_path.is_file():
        return

    content = finnhub_path.read_text().strip()
    # Parse "key = value" format
    for line in content.splitlines():
        if "=" in line:
            _, value = line.split("=", 1)
            os.environ["FINNHUB_API_KEY"] = value.strip().strip("'\"")
            logger.info("Loaded FINNHUB_API_KEY from %s", finnhub_path)
            break


# Global settings instance
settings = Settings()

# Load credentials from files on module import
_load_credentials()
