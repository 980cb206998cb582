"""Database models for the backend server.

Models:
    OptionPosition: One sold option (put or call) with its derived P/L
    Setting: Key-value store for JSON configuration blobs
"""

from .position import OptionPosition
from .setting import Setting

__all__ = [
    "OptionPosition",
    "Setting",
]
