"""Configuration management for the options tracker CLI.

This module provides configuration loading, validation, and management
for the tracker CLI: where positions are stored, where strategy settings
live, and how stock prices are fetched.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

STRATEGY_STORAGE_OPTIONS = ("database", "file")


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    pass


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


class TrackerConfig:
    """Configuration for the tracker CLI.

    Attributes:
        database_path: SQLite file holding positions
        data_dir: Directory for file-based strategy settings
        strategy_storage: "database" (settings table) or "file" (JSON in data_dir)
        price_cache_ttl: Seconds a fetched stock price stays fresh
        price_fetch_workers: Thread pool size for batch price lookups
        finnhub_key_file: Finnhub API key file (relative to project root)
        verbose: Enable verbose logging
        json_output: Output in JSON format
    """

    def __init__(
        self,
        database_path: str = "~/.options_tracker/positions.db",
        data_dir: str = "~/.options_tracker",
        strategy_storage: str = "database",
        price_cache_ttl: int = 300,
        price_fetch_workers: int = 8,
        finnhub_key_file: str = "config/finnhub_api_key.txt",
        verbose: bool = False,
        json_output: bool = False,
    ):
        self.database_path = database_path
        self.data_dir = data_dir
        self.strategy_storage = strategy_storage
        self.price_cache_ttl = price_cache_ttl
        self.price_fetch_workers = price_fetch_workers
        self.finnhub_key_file = finnhub_key_file
        self.verbose = verbose
        self.json_output = json_output

        self._validate()

    def _validate(self):
        """Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.database_path:
            raise ConfigurationError("database_path cannot be empty")

        if self.strategy_storage not in STRATEGY_STORAGE_OPTIONS:
            raise ConfigurationError(
                f"strategy_storage must be one of: {', '.join(STRATEGY_STORAGE_OPTIONS)}"
            )

        if self.price_cache_ttl <= 0:
            raise ConfigurationError("price_cache_ttl must be positive")

        if not 1 <= self.price_fetch_workers <= 32:
            raise ConfigurationError("price_fetch_workers must be between 1 and 32")

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get default configuration file path.

        Returns:
            Path to default config file (~/.options_tracker/config.yaml)
        """
        return Path.home() / ".options_tracker" / "config.yaml"

    @classmethod
    def load_from_file(cls, path: Optional[Path] = None) -> "TrackerConfig":
        """Load configuration from YAML file.

        If the file doesn't exist, returns default configuration. File
        values are merged with environment variable overrides.

        Args:
            path: Optional path to config file (default: ~/.options_tracker/config.yaml)

        Returns:
            Configuration instance

        Raises:
            ConfigurationError: If configuration file is invalid
        """
        config_path = path or cls.get_default_config_path()

        config_dict: dict[str, Any] = {}

        if config_path.exists():
            try:
                with open(config_path) as f:
                    file_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
            except OSError as e:
                raise ConfigurationError(f"Failed to load configuration file: {e}") from e

            if file_config is not None and not isinstance(file_config, dict):
                raise ConfigurationError("Configuration file must contain a mapping")
            config_dict = file_config or {}
            logger.debug(f"Loaded configuration from {config_path}")
        else:
            logger.debug(f"Configuration file not found at {config_path}, using defaults")

        return cls.merge_with_defaults(config_dict)

    @classmethod
    def merge_with_defaults(cls, config_dict: dict[str, Any]) -> "TrackerConfig":
        """Merge configuration dictionary with defaults and environment variables.

        Precedence order (highest to lowest):
        1. Environment variables (TRACKER_*)
        2. Config file values
        3. Default values

        Args:
            config_dict: Configuration dictionary from file

        Returns:
            Configuration instance

        Raises:
            ConfigurationError: If configuration is invalid

        Example:
            >>> config = TrackerConfig.merge_with_defaults({
            ...     "storage": {"database_path": "/tmp/positions.db"}
            ... })
        """
        storage_config = config_dict.get("storage", {}) or {}
        prices_config = config_dict.get("prices", {}) or {}
        cli_config = config_dict.get("cli", {}) or {}

        verbose = _env_flag("TRACKER_VERBOSE")
        json_output = _env_flag("TRACKER_JSON_OUTPUT")

        try:
            return cls(
                database_path=os.getenv(
                    "TRACKER_DATABASE_PATH",
                    storage_config.get("database_path", "~/.options_tracker/positions.db"),
                ),
                data_dir=os.getenv(
                    "TRACKER_DATA_DIR",
                    storage_config.get("data_dir", "~/.options_tracker"),
                ),
                strategy_storage=os.getenv(
                    "TRACKER_STRATEGY_STORAGE",
                    storage_config.get("strategy_storage", "database"),
                ),
                price_cache_ttl=int(
                    os.getenv("TRACKER_PRICE_CACHE_TTL", prices_config.get("cache_ttl", 300))
                ),
                price_fetch_workers=int(
                    os.getenv(
                        "TRACKER_PRICE_FETCH_WORKERS", prices_config.get("fetch_workers", 8)
                    )
                ),
                finnhub_key_file=os.getenv(
                    "TRACKER_FINNHUB_KEY_FILE",
                    prices_config.get("finnhub_key_file", "config/finnhub_api_key.txt"),
                ),
                verbose=verbose if verbose is not None else bool(cli_config.get("verbose", False)),
                json_output=(
                    json_output
                    if json_output is not None
                    else bool(cli_config.get("json_output", False))
                ),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def save_to_file(self, path: Optional[Path] = None):
        """Save configuration to YAML file.

        Args:
            path: Optional path to save to (default: ~/.options_tracker/config.yaml)

        Raises:
            ConfigurationError: If save fails
        """
        config_path = path or self.get_default_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(config_path, "w") as f:
                yaml.dump(self.to_dict(), f, default_flow_style=False)
            logger.info(f"Configuration saved to {config_path}")
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to the nested file layout."""
        return {
            "storage": {
                "database_path": self.database_path,
                "data_dir": self.data_dir,
                "strategy_storage": self.strategy_storage,
            },
            "prices": {
                "cache_ttl": self.price_cache_ttl,
                "fetch_workers": self.price_fetch_workers,
                "finnhub_key_file": self.finnhub_key_file,
            },
            "cli": {
                "verbose": self.verbose,
                "json_output": self.json_output,
            },
        }

    def __repr__(self) -> str:
        return (
            f"TrackerConfig("
            f"database_path={self.database_path!r}, "
            f"strategy_storage={self.strategy_storage!r}, "
            f"price_cache_ttl={self.price_cache_ttl}, "
            f"verbose={self.verbose}, "
            f"json_output={self.json_output}"
            ")"
        )


def load_config(config_path: Optional[Path] = None) -> TrackerConfig:
    """Load configuration from file or defaults.

    Example:
        >>> from src.tracker.config import load_config
        >>> config = load_config()
        >>> print(config.database_path)
    """
    return TrackerConfig.load_from_file(config_path)
