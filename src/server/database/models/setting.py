"""Key-value setting database model.

Holds JSON configuration blobs, such as the strategy configuration and
its alert dismissal list, under a fixed key.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from src.server.database.session import Base


class Setting(Base):
    """Setting model.

    Attributes:
        key: Unique setting name
        value: JSON string
        updated_at: Timestamp when the value was last written
    """

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Setting(key={self.key})>"
