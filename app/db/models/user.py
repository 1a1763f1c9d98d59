# app/db/models/user.py
"""User accounts authenticated by a static access token"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.db.models.base import Base, IDMixin, TimestampMixin


class User(Base, IDMixin, TimestampMixin):
    __tablename__ = "users"

    full_name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    access_token = Column(String(255), unique=True, nullable=False, index=True)

    led_projects = relationship("Project", back_populates="leader", foreign_keys="Project.leader_id")
    assigned_tasks = relationship("Task", back_populates="assignee")

    def __repr__(self):
        return f"<User email={self.email}>"
