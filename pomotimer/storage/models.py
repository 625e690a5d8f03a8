"""SQLAlchemy ORM models for PomoTimer."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StoredValue(Base):
    """One JSON-encoded value per storage key (settings, timer state)."""

    __tablename__ = "stored_values"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow,
    )

    def __repr__(self) -> str:
        return f"<StoredValue key={self.key} updated_at={self.updated_at}>"
