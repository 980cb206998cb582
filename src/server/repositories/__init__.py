"""Data access layer repositories."""

from src.server.repositories.position import PositionRepository
from src.server.repositories.setting import SettingRepository

__all__ = [
    "PositionRepository",
    "SettingRepository",
]
