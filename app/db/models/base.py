from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime
from app.db.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class IDMixin:
    """Mixin for the integer surrogate key"""
    id = Column(Integer, primary_key=True, index=True)
