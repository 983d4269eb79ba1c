from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(Base):
    """
    One durable string value per key.
    The saved-analysis collection lives in a single row as a JSON document.
    """

    __tablename__ = "key_value_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
