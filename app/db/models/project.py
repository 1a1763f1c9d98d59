# app/db/models/project.py
"""Project model owning a kanban board"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship

from app.db.models.base import Base, IDMixin, TimestampMixin

# Ordered list of status codes; a plain JSON array where ARRAY is unsupported
StatusWorkflowType = ARRAY(String(25)).with_variant(JSON(), "sqlite")


class Project(Base, IDMixin, TimestampMixin):
    """A project whose tasks are grouped into columns by its status workflow"""
    __tablename__ = "projects"

    title = Column(String(255), nullable=False)
    code = Column(String(10), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    next_task_sequence = Column(Integer, nullable=False, default=1)
    status_workflow = Column(
        StatusWorkflowType,
        nullable=False,
        default=lambda: ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE"]
    )

    # Foreign keys
    leader_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    leader = relationship("User", foreign_keys=[leader_id], back_populates="led_projects")
    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Task.position"
    )

    def __repr__(self):
        return f"<Project code={self.code} title={self.title}>"
