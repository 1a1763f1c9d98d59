# app/db/models/tag.py
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Table
from sqlalchemy.orm import relationship

from app.db.models.base import Base, utc_now

task_tags = Table(
    "task_tags",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("tag", String(100), ForeignKey("tags.tag", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    """Free-form lowercase label; the text itself is the key"""
    __tablename__ = "tags"

    tag = Column(String(100), primary_key=True)
    color = Column(String(7), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    tasks = relationship("Task", secondary=task_tags, back_populates="tags")

    def __repr__(self):
        return f"<Tag tag={self.tag} color={self.color}>"
