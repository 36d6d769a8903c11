"""SQLAlchemy ORM models for Cucina.

Tables:
- kv_records: key-value rows holding the serialized catalog aggregate
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .db import Base


class KeyValueRecord(Base):
    """One JSON document stored under a string key."""
    __tablename__ = "kv_records"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
