# app/api/v1/schemas/tasks.py
import re
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.db.models.enums import TaskPriority
from app.api.v1.schemas.base import CamelModel, STATUS_CODE_PATTERN, TAG_NAME_PATTERN
from app.api.v1.schemas.tags import TagSummary

_TAG_NAME = re.compile(TAG_NAME_PATTERN)


def _validate_tag_names(names: Optional[List[str]]) -> Optional[List[str]]:
    if names is None:
        return names
    for name in names:
        if len(name) > 100 or not _TAG_NAME.fullmatch(name):
            raise ValueError(f"Invalid tag name '{name}': use lowercase words separated by hyphens")
    return names


class TaskBase(CamelModel):
    """Base schema for task"""
    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    story_points: Optional[int] = Field(None, ge=1, le=21)
    assignee_id: Optional[int] = Field(None, ge=1)
    prompt: Optional[str] = Field(None, max_length=10000)
    is_blocked: bool = False
    blocked_reason: Optional[str] = Field(None, max_length=1000)
    git_feature_branch: Optional[str] = Field(None, max_length=255)
    git_pull_request_url: Optional[str] = Field(None, max_length=500)


class TaskCreate(TaskBase):
    """Schema for creating a task; it is appended to the bottom of its column"""
    project_id: int = Field(..., ge=1)
    status: Optional[str] = Field(
        None,
        max_length=25,
        pattern=STATUS_CODE_PATTERN,
        description="Defaults to the first status of the project workflow"
    )
    tag_names: Optional[List[str]] = None

    @field_validator("tag_names")
    @classmethod
    def validate_tag_names(cls, v):
        return _validate_tag_names(v)


class TaskUpdate(CamelModel):
    """Schema for updating a task"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[str] = Field(None, max_length=25, pattern=STATUS_CODE_PATTERN)
    position: Optional[int] = Field(None, ge=0, description="Stored as given")
    priority: Optional[TaskPriority] = None
    story_points: Optional[int] = Field(None, ge=1, le=21)
    assignee_id: Optional[int] = Field(None, ge=1)
    prompt: Optional[str] = Field(None, max_length=10000)
    is_blocked: Optional[bool] = None
    blocked_reason: Optional[str] = Field(None, max_length=1000)
    git_feature_branch: Optional[str] = Field(None, max_length=255)
    git_pull_request_url: Optional[str] = Field(None, max_length=500)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    tag_names: Optional[List[str]] = None

    @field_validator("tag_names")
    @classmethod
    def validate_tag_names(cls, v):
        return _validate_tag_names(v)


class TaskStatusUpdate(CamelModel):
    """Schema for moving a task to another column"""
    status: str = Field(..., max_length=25, pattern=STATUS_CODE_PATTERN, description="New task status")


class TaskTagsUpdate(CamelModel):
    tag_names: List[str] = Field(..., description="Complete tag set for the task")

    @field_validator("tag_names")
    @classmethod
    def validate_tag_names(cls, v):
        return _validate_tag_names(v)


class PositionUpdate(CamelModel):
    task_id: int
    new_position: int


class BulkPositionUpdate(CamelModel):
    """Client-computed positions for one column, written as given"""
    position_updates: List[PositionUpdate]


class TaskResponse(TaskBase):
    """Full task representation"""
    id: int
    task_id: str = Field(..., description="Human identifier, e.g. WEBRED-3")
    project_id: int
    project_code: str
    status: str
    position: int
    assignee_name: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    tags: List[TagSummary] = []
    image_count: int = 0

    @classmethod
    def from_model(cls, task):
        """Convert Task model to API response; expects relationships loaded"""
        return cls(
            id=task.id,
            task_id=task.task_id,
            project_id=task.project_id,
            project_code=task.project.code,
            title=task.title,
            status=task.status,
            position=task.position,
            priority=task.priority,
            story_points=task.story_points,
            assignee_id=task.assignee_id,
            assignee_name=task.assignee.full_name if task.assignee else None,
            prompt=task.prompt,
            is_blocked=bool(task.is_blocked),
            blocked_reason=task.blocked_reason,
            git_feature_branch=task.git_feature_branch,
            git_pull_request_url=task.git_pull_request_url,
            started_at=task.started_at,
            completed_at=task.completed_at,
            created_at=task.created_at,
            updated_at=task.updated_at,
            tags=[TagSummary(tag=tag.tag, color=tag.color) for tag in task.tags],
            image_count=len(task.images)
        )
