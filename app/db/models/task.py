# app/db/models/task.py
"""Task model placed on a kanban board"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index, Enum, DateTime, Boolean
from sqlalchemy.orm import relationship

from app.db.models.base import Base, IDMixin, TimestampMixin
from app.db.models.enums import TaskPriority
from app.db.models.tag import task_tags


class Task(Base, IDMixin, TimestampMixin):
    """A card in one (project, status) column, ordered by position"""
    __tablename__ = "tasks"

    # Human identifier minted from the project code, e.g. WEBRED-12
    task_id = Column(String(50), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    status = Column(String(25), nullable=False, default="TO_DO")
    position = Column(Integer, nullable=False, default=0)
    story_points = Column(Integer, nullable=True)
    priority = Column(
        Enum(TaskPriority, native_enum=False, length=20),
        nullable=False,
        default=TaskPriority.MEDIUM
    )
    prompt = Column(Text, nullable=True)
    is_blocked = Column(Boolean, nullable=False, default=False)
    blocked_reason = Column(Text, nullable=True)
    git_feature_branch = Column(String(255), nullable=True)
    git_pull_request_url = Column(String(500), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Foreign keys
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", back_populates="assigned_tasks")
    tags = relationship("Tag", secondary=task_tags, back_populates="tasks", order_by="Tag.tag")
    images = relationship(
        "ImageMetadata",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="ImageMetadata.id"
    )

    __table_args__ = (
        Index('idx_task_project_status_position', 'project_id', 'status', 'position'),
        Index('idx_task_assignee', 'assignee_id'),
    )

    def __repr__(self):
        return f"<Task task_id={self.task_id} status={self.status} position={self.position}>"
