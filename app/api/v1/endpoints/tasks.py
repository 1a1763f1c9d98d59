# app/api/v1/endpoints/tasks.py
"""Task management endpoints"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.db.database import get_db
from app.db import crud
from app.db.models import User, Task, TaskPriority
from app.api.v1.schemas.base import STATUS_CODE_PATTERN
from app.api.v1.schemas.tasks import TaskCreate, TaskUpdate, TaskResponse, TaskStatusUpdate, TaskTagsUpdate
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.exceptions.kanban import ProjectNotFoundError, TaskNotFoundError, InternalError

router = APIRouter()


async def get_task_or_404(db: AsyncSession, task_id: int) -> Task:
    task = await crud.task.get_task_by_id(db, task_id)
    if not task:
        raise TaskNotFoundError()
    return task


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
        project_id: Optional[int] = Query(None, alias="projectId", ge=1),
        task_status: Optional[str] = Query(None, alias="status", max_length=25, pattern=STATUS_CODE_PATTERN),
        priority: Optional[TaskPriority] = Query(None),
        assignee_id: Optional[int] = Query(None, alias="assigneeId", ge=1),
        search: Optional[str] = Query(None, min_length=1, max_length=255),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """List tasks with optional filters, ordered by status then position"""
    try:
        tasks = await crud.task.get_tasks(
            db,
            project_id=project_id,
            status=task_status,
            priority=priority,
            assignee_id=assignee_id,
            search=search
        )
        return [TaskResponse.from_model(task) for task in tasks]
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to list tasks", error=str(e))
        raise InternalError("Failed to fetch tasks")


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
        task_data: TaskCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Create a task at the bottom of its status column"""
    try:
        project = await crud.project.get_project_by_id(db, task_data.project_id)
        if not project:
            raise ProjectNotFoundError()

        task = await crud.task.create_task(db, task_data, project)
        tracing.info("Task created", task_id=task.task_id, position=task.position, user=current_user.email)
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to create task", project_id=task_data.project_id, error=str(e))
        raise InternalError("Failed to create task")


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
        task_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    return TaskResponse.from_model(await get_task_or_404(db, task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
        task_id: int,
        updates: TaskUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        task = await get_task_or_404(db, task_id)
        task = await crud.task.update_task(db, task, updates)
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update task", task_id=task_id, error=str(e))
        raise InternalError("Failed to update task")


@router.delete("/{task_id}")
async def delete_task(
        task_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        task = await get_task_or_404(db, task_id)
        await crud.task.delete_task(db, task)
        tracing.info("Task deleted", task_id=task.task_id, user=current_user.email)
        return {"message": "Task deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete task", task_id=task_id, error=str(e))
        raise InternalError("Failed to delete task")


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
        task_id: int,
        status_update: TaskStatusUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Move a task to the bottom of another status column"""
    try:
        task = await get_task_or_404(db, task_id)
        task = await crud.task.change_task_status(db, task, status_update.status)
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update task status", task_id=task_id, error=str(e))
        raise InternalError("Failed to update task status")


@router.put("/{task_id}/tags", response_model=TaskResponse)
async def set_task_tags(
        task_id: int,
        tags_update: TaskTagsUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Replace the task's tags; unknown tags are created"""
    try:
        task = await get_task_or_404(db, task_id)
        task = await crud.task.set_task_tags(db, task, tags_update.tag_names)
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to set task tags", task_id=task_id, error=str(e))
        raise InternalError("Failed to update task tags")
