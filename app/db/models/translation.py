# app/db/models/translation.py
from sqlalchemy import Column, String, Integer, ForeignKey, JSON

from app.db.models.base import Base, IDMixin, TimestampMixin


class Translation(Base, IDMixin, TimestampMixin):
    """UI label bundle for one language"""
    __tablename__ = "translations"

    language_code = Column(String(5), unique=True, nullable=False, index=True)
    translations = Column(JSON, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self):
        return f"<Translation language={self.language_code}>"
