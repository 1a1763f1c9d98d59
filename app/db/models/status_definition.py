# app/db/models/status_definition.py
"""Global catalog of status codes a project workflow may reference"""
from sqlalchemy import Column, String, Integer, ForeignKey

from app.db.models.base import Base, TimestampMixin


class StatusDefinition(Base, TimestampMixin):
    __tablename__ = "status_definitions"

    code = Column(String(25), primary_key=True)
    description = Column(String(200), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self):
        return f"<StatusDefinition code={self.code}>"
