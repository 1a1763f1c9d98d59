# app/api/v1/schemas/projects.py
from pydantic import Field
from typing import Optional, List
from datetime import datetime

from app.api.v1.schemas.base import CamelModel, STATUS_CODE_PATTERN


class ProjectBase(CamelModel):
    """Base schema for project"""
    title: str = Field(..., min_length=1, max_length=255, description="Project title")
    description: Optional[str] = Field(None, max_length=5000)


class ProjectCreate(ProjectBase):
    """Schema for creating a project"""
    code: str = Field(
        ...,
        min_length=2,
        max_length=10,
        pattern=r"^[A-Z]+$",
        description="Uppercase letters only; immutable once created"
    )
    leader_id: int = Field(..., ge=1)
    status_workflow: Optional[List[str]] = Field(None, description="Defaults to the configured workflow")


class ProjectUpdate(CamelModel):
    """Schema for updating a project; the code cannot change"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    leader_id: Optional[int] = Field(None, ge=1)


class ProjectResponse(ProjectBase):
    """Project with leader details"""
    id: int
    code: str
    leader_id: int
    leader_name: Optional[str] = None
    leader_email: Optional[str] = None
    status_workflow: List[str]
    next_task_sequence: int
    task_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, project, task_count: Optional[int] = None):
        """Convert Project model to API response; expects the leader loaded"""
        return cls(
            id=project.id,
            title=project.title,
            code=project.code,
            description=project.description,
            leader_id=project.leader_id,
            leader_name=project.leader.full_name if project.leader else None,
            leader_email=project.leader.email if project.leader else None,
            status_workflow=list(project.status_workflow or []),
            next_task_sequence=project.next_task_sequence,
            task_count=task_count,
            created_at=project.created_at,
            updated_at=project.updated_at
        )


class StatusWorkflow(CamelModel):
    """Ordered status codes of a project; request and response body"""
    status_workflow: List[str] = Field(..., description="Ordered status codes, left to right")


class ColumnPosition(CamelModel):
    id: int
    position: int


class TaskPositionRequest(CamelModel):
    """Drop a task at a position in a column"""
    new_position: int
    status: str = Field(..., max_length=25, pattern=STATUS_CODE_PATTERN)
