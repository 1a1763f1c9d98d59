# app/api/v1/endpoints/kanban.py
"""Board operations scoped to one project: column positions and task moves"""
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db.database import get_db
from app.db import crud
from app.db.models import User, Project, Task
from app.api.v1.schemas.base import STATUS_CODE_PATTERN
from app.api.v1.schemas.projects import ColumnPosition, TaskPositionRequest
from app.api.v1.schemas.tasks import TaskResponse, TaskUpdate, TaskStatusUpdate, BulkPositionUpdate
from app.api.v1.endpoints.projects import get_project_or_404
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.exceptions.kanban import TaskNotFoundError, ForbiddenError, InternalError

router = APIRouter()


async def _get_project_task(db: AsyncSession, project: Project, task_key: str) -> Task:
    """Task by human identifier; it must live in the given project"""
    task = await crud.task.get_task_by_task_id(db, task_key)
    if not task:
        raise TaskNotFoundError()
    if task.project_id != project.id:
        raise ForbiddenError("Task does not belong to this project")
    return task


@router.get("/{code}/kanban/tasks/column/{column_status}", response_model=List[ColumnPosition])
async def get_column(
        code: str,
        column_status: str = Path(..., max_length=25, pattern=STATUS_CODE_PATTERN),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Task ids and positions of one column, top to bottom"""
    project = await get_project_or_404(db, code)
    return await crud.task.get_column_positions(db, project.id, column_status)


@router.patch("/{code}/kanban/tasks/column/{column_status}/positions", response_model=List[ColumnPosition])
async def bulk_update_positions(
        code: str,
        payload: BulkPositionUpdate,
        column_status: str = Path(..., max_length=25, pattern=STATUS_CODE_PATTERN),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Write client-computed positions for a column as given"""
    try:
        project = await get_project_or_404(db, code)
        positions = await crud.task.bulk_update_positions(db, project, column_status, payload.position_updates)
        tracing.info(
            "Column positions updated",
            project=code,
            status=column_status,
            updates=len(payload.position_updates),
            user=current_user.email
        )
        return positions
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to bulk update positions", project=code, status=column_status, error=str(e))
        raise InternalError("Failed to update task positions")


@router.patch("/{code}/kanban/tasks/{task_id}/position", response_model=TaskResponse)
async def update_task_position(
        code: str,
        task_id: int,
        position_request: TaskPositionRequest,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """
    Drop a task at a position. Within its column the task lands between its
    new neighbours; dropped into another column it keeps the given position.
    """
    try:
        project = await get_project_or_404(db, code)
        task = await crud.task.get_task_by_id(db, task_id)
        if not task or task.project_id != project.id:
            raise TaskNotFoundError()

        task = await crud.task.reposition_task(db, task, position_request.new_position, position_request.status)
        tracing.info(
            "Task repositioned",
            task_id=task.task_id,
            status=task.status,
            position=task.position,
            user=current_user.email
        )
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update task position", project=code, task_id=task_id, error=str(e))
        raise InternalError("Failed to update task position")


@router.patch("/{code}/tasks/{task_key}/status", response_model=TaskResponse)
async def update_project_task_status(
        code: str,
        task_key: str,
        status_update: TaskStatusUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        project = await get_project_or_404(db, code)
        task = await _get_project_task(db, project, task_key)
        task = await crud.task.change_task_status(db, task, status_update.status)
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update task status", project=code, task_key=task_key, error=str(e))
        raise InternalError("Failed to update task status")


@router.put("/{code}/tasks/{task_key}", response_model=TaskResponse)
async def update_project_task(
        code: str,
        task_key: str,
        updates: TaskUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        project = await get_project_or_404(db, code)
        task = await _get_project_task(db, project, task_key)
        task = await crud.task.update_task(db, task, updates)
        return TaskResponse.from_model(task)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update task", project=code, task_key=task_key, error=str(e))
        raise InternalError("Failed to update task")


@router.delete("/{code}/tasks/{task_key}")
async def delete_project_task(
        code: str,
        task_key: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        project = await get_project_or_404(db, code)
        task = await _get_project_task(db, project, task_key)
        await crud.task.delete_task(db, task)
        tracing.info("Task deleted", task_id=task_key, user=current_user.email)
        return {"message": "Task deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete task", project=code, task_key=task_key, error=str(e))
        raise InternalError("Failed to delete task")
