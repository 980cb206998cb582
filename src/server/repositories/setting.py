"""Repository for key-value settings.

Implements the tracker's ConfigPersistence port on top of the settings
table, so the strategy store can live in the same database as positions.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.server.database.models.setting import Setting
from src.tracker.exceptions import PersistenceError
from src.tracker.strategy import ConfigPersistence

logger = logging.getLogger(__name__)


class SettingRepository(ConfigPersistence):
    """Database-backed configuration persistence.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str) -> Optional[str]:
        try:
            setting = self.db.query(Setting).filter(Setting.key == key).first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read setting {key}: {e}") from e
        return setting.value if setting else None

    def save(self, key: str, value: str) -> None:
        try:
            setting = self.db.query(Setting).filter(Setting.key == key).first()
            if setting is None:
                self.db.add(Setting(key=key, value=value))
            else:
                setting.value = value
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save setting {key}: {e}") from e

        logger.debug(f"Saved setting: {key}")
