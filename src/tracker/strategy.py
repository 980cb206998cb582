"""
Strategy configuration and alert dismissal store.

Holds the user's chosen thresholds and the time-boxed dismissal list.
Storage is abstracted behind a small key-value persistence port so the
same store runs against a JSON file (CLI), the database (server) or
memory (tests).

The dismissal list and the timestamp map always change together:
entries older than ALERT_REAPPEAR_HOURS are purged from both at once.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Optional

from .exceptions import ConfigCorruptError, PersistenceError, ValidationError
from .models import StrategyConfig, UserStrategyConfig
from .status import StrategyType

logger = logging.getLogger(__name__)

STRATEGY_CONFIG_KEY = "strategy_config"
ALERT_REAPPEAR_HOURS = 24

DEFAULT_ROLL_THRESHOLD = 3.0
DEFAULT_CLOSE_THRESHOLD = 75.0

# Allowed ranges for custom thresholds (percent)
ROLL_THRESHOLD_RANGE = (1.0, 10.0)
CLOSE_THRESHOLD_RANGE = (50.0, 90.0)

STANDARD_STRATEGY = StrategyConfig(
    strategy_type=StrategyType.STANDARD,
    roll_threshold=DEFAULT_ROLL_THRESHOLD,
    close_threshold=DEFAULT_CLOSE_THRESHOLD,
)


def validate_thresholds(
    roll_threshold: Optional[float] = None,
    close_threshold: Optional[float] = None,
) -> None:
    """
    Check custom thresholds against their allowed ranges.

    Raises:
        ValidationError: If a supplied threshold is out of range
    """
    if roll_threshold is not None:
        low, high = ROLL_THRESHOLD_RANGE
        if not low <= roll_threshold <= high:
            raise ValidationError(
                "custom_roll_threshold", f"must be between {low:g} and {high:g}"
            )
    if close_threshold is not None:
        low, high = CLOSE_THRESHOLD_RANGE
        if not low <= close_threshold <= high:
            raise ValidationError(
                "custom_close_threshold", f"must be between {low:g} and {high:g}"
            )


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def get_strategy_config(user_config: UserStrategyConfig) -> StrategyConfig:
    """Resolve the thresholds to evaluate alerts with."""
    if user_config.active_strategy == StrategyType.STANDARD:
        return STANDARD_STRATEGY

    return StrategyConfig(
        strategy_type=StrategyType.CUSTOM,
        roll_threshold=user_config.custom_roll_threshold,
        close_threshold=user_config.custom_close_threshold,
    )


def user_config_to_dict(config: UserStrategyConfig) -> dict[str, Any]:
    """Serialize a UserStrategyConfig to plain JSON types."""
    return {
        "active_strategy": config.active_strategy.value,
        "custom_roll_threshold": config.custom_roll_threshold,
        "custom_close_threshold": config.custom_close_threshold,
        "dismissed_alerts": list(config.dismissed_alerts),
        "dismissed_at": dict(config.dismissed_at),
    }


def parse_user_config(raw: str) -> UserStrategyConfig:
    """
    Parse a stored configuration blob, filling gaps with defaults.

    Args:
        raw: JSON text as saved by user_config_to_dict

    Returns:
        Parsed UserStrategyConfig

    Raises:
        ConfigCorruptError: If the blob is not valid JSON or has bad values
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ConfigCorruptError(f"Invalid strategy config JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigCorruptError("Strategy config must be a JSON object")

    defaults = UserStrategyConfig()
    try:
        dismissed_alerts = [str(i) for i in data.get("dismissed_alerts", [])]
        dismissed_at = {
            str(k): int(v) for k, v in dict(data.get("dismissed_at", {})).items()
        }
        return UserStrategyConfig(
            active_strategy=StrategyType(
                data.get("active_strategy", defaults.active_strategy.value)
            ),
            custom_roll_threshold=float(
                data.get("custom_roll_threshold", defaults.custom_roll_threshold)
            ),
            custom_close_threshold=float(
                data.get("custom_close_threshold", defaults.custom_close_threshold)
            ),
            dismissed_alerts=dismissed_alerts,
            dismissed_at=dismissed_at,
        )
    except (TypeError, ValueError) as e:
        raise ConfigCorruptError(f"Invalid strategy config values: {e}") from e


def purge_expired_dismissals(
    config: UserStrategyConfig,
    current_ms: int,
    retention_hours: int = ALERT_REAPPEAR_HOURS,
) -> UserStrategyConfig:
    """
    Drop dismissals older than the retention window.

    An id without a timestamp (or a timestamp without an id) is dropped
    as well, so the list and the map stay in lockstep.

    Returns:
        A new config; the input is not modified
    """
    window_ms = retention_hours * 60 * 60 * 1000

    kept = []
    for position_id in config.dismissed_alerts:
        dismissed_time = config.dismissed_at.get(position_id)
        if dismissed_time is None:
            continue
        if current_ms - dismissed_time < window_ms and position_id not in kept:
            kept.append(position_id)

    return replace(
        config,
        dismissed_alerts=kept,
        dismissed_at={pid: config.dismissed_at[pid] for pid in kept},
    )


class ConfigPersistence(ABC):
    """
    Key-value port used to load and save configuration blobs.

    Implementations raise PersistenceError when the backing storage fails.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """Return the stored blob, or None when nothing is stored."""

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Store a blob, replacing any previous value."""


class InMemoryPersistence(ConfigPersistence):
    """Dictionary-backed persistence, used in tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFilePersistence(ConfigPersistence):
    """
    Stores each key as a JSON file in a directory.

    Used by the CLI, next to the CLI config under ~/.options_tracker/.
    """

    def __init__(self, directory: str = "~/.options_tracker"):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text()
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def save(self, key: str, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(key).write_text(value)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self._path(key)}: {e}") from e
        logger.debug(f"Saved {key} to {self._path(key)}")


class StrategyConfigStore:
    """
    Reads and mutates the persisted UserStrategyConfig.

    Every read sweeps expired dismissals. Every mutation re-reads the
    stored value, applies the change and saves the whole structure, so
    concurrent writers resolve as last write wins.

    Attributes:
        persistence: Key-value port holding the JSON blob
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(
        self,
        persistence: ConfigPersistence,
        clock: Callable[[], int] = now_ms,
        key: str = STRATEGY_CONFIG_KEY,
    ):
        self.persistence = persistence
        self.clock = clock
        self.key = key

    def _read(self) -> UserStrategyConfig:
        try:
            raw = self.persistence.load(self.key)
        except (PersistenceError, OSError) as e:
            logger.warning(f"Could not read strategy config, using defaults: {e}")
            return UserStrategyConfig()

        if raw is None:
            return UserStrategyConfig()

        try:
            return parse_user_config(raw)
        except ConfigCorruptError as e:
            logger.warning(f"{e}. Falling back to default strategy config")
            return UserStrategyConfig()

    def _write(self, config: UserStrategyConfig) -> UserStrategyConfig:
        self.persistence.save(self.key, json.dumps(user_config_to_dict(config)))
        return config

    def load(self) -> UserStrategyConfig:
        """
        Load the configuration and purge expired dismissals.

        Falls back to defaults when nothing is stored or the stored value
        is corrupt. The purge is persisted only if something expired; if
        that save fails the purged config is still returned and the purge
        is retried on the next load.
        """
        stored = self._read()
        config = purge_expired_dismissals(stored, self.clock())

        if config.dismissed_alerts != stored.dismissed_alerts or (
            config.dismissed_at != stored.dismissed_at
        ):
            expired = len(stored.dismissed_at) - len(config.dismissed_at)
            logger.info(f"Purged {expired} expired alert dismissal(s)")
            try:
                self._write(config)
            except (PersistenceError, OSError) as e:
                logger.warning(f"Could not save purged dismissals: {e}")

        return config

    def purge_expired(self) -> UserStrategyConfig:
        """Sweep dismissals older than ALERT_REAPPEAR_HOURS."""
        return self.load()

    def get_strategy_config(self) -> StrategyConfig:
        """Thresholds for the active strategy."""
        return get_strategy_config(self.load())

    def update(
        self,
        active_strategy: Optional[StrategyType] = None,
        custom_roll_threshold: Optional[float] = None,
        custom_close_threshold: Optional[float] = None,
    ) -> UserStrategyConfig:
        """
        Change strategy settings; only supplied values change.

        Raises:
            ValidationError: If a custom threshold is out of range
            PersistenceError: If the new settings cannot be saved
        """
        validate_thresholds(custom_roll_threshold, custom_close_threshold)
        config = self.load()

        if active_strategy is not None:
            config.active_strategy = active_strategy
        if custom_roll_threshold is not None:
            config.custom_roll_threshold = custom_roll_threshold
        if custom_close_threshold is not None:
            config.custom_close_threshold = custom_close_threshold

        logger.info(
            f"Strategy set to {config.active_strategy.value} "
            f"(roll={config.custom_roll_threshold}%, close={config.custom_close_threshold}%)"
        )
        return self._write(config)

    def dismiss(self, position_id: str) -> UserStrategyConfig:
        """Hide alerts for a position for the next 24 hours."""
        config = self.load()

        if position_id not in config.dismissed_alerts:
            config.dismissed_alerts.append(position_id)
        config.dismissed_at[position_id] = self.clock()

        logger.info(f"Dismissed alerts for position {position_id}")
        return self._write(config)

    def undismiss(self, position_id: str) -> UserStrategyConfig:
        """Show alerts for a position again."""
        config = self.load()

        config.dismissed_alerts = [
            pid for pid in config.dismissed_alerts if pid != position_id
        ]
        config.dismissed_at.pop(position_id, None)

        logger.info(f"Restored alerts for position {position_id}")
        return self._write(config)

    def clear_dismissed(self) -> UserStrategyConfig:
        """Restore every dismissed alert."""
        config = self.load()
        config.dismissed_alerts = []
        config.dismissed_at = {}

        logger.info("Cleared all alert dismissals")
        return self._write(config)
