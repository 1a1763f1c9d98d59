# app/api/v1/endpoints/projects.py
"""Project endpoints, including the status workflow of each project"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.db.database import get_db
from app.db import crud
from app.db.models import User, Project, TaskPriority
from app.api.v1.schemas.base import STATUS_CODE_PATTERN
from app.api.v1.schemas.projects import ProjectCreate, ProjectUpdate, ProjectResponse, StatusWorkflow
from app.api.v1.schemas.tasks import TaskResponse
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.exceptions.kanban import ProjectNotFoundError, InternalError

router = APIRouter()


async def get_project_or_404(db: AsyncSession, code: str) -> Project:
    project = await crud.project.get_project_by_code(db, code)
    if not project:
        raise ProjectNotFoundError()
    return project


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
        leader_id: Optional[int] = Query(None, alias="leaderId", ge=1),
        search: Optional[str] = Query(None, min_length=1, max_length=255),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """All projects with leader details and task counts, ordered by title"""
    try:
        projects = await crud.project.get_projects(db, leader_id=leader_id, search=search)
        return [ProjectResponse.from_model(project, count) for project, count in projects]
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to list projects", error=str(e))
        raise InternalError("Failed to fetch projects")


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
        project_data: ProjectCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        project = await crud.project.create_project(db, project_data, current_user.id)
        tracing.info("Project created", code=project.code, user=current_user.email)
        return ProjectResponse.from_model(project, 0)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to create project", code=project_data.code, error=str(e))
        raise InternalError("Failed to create project")


@router.get("/{code}", response_model=ProjectResponse)
async def get_project(
        code: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    project = await get_project_or_404(db, code)
    return ProjectResponse.from_model(project, await crud.project.get_project_task_count(db, project.id))


@router.put("/{code}", response_model=ProjectResponse)
async def update_project(
        code: str,
        updates: ProjectUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        project = await get_project_or_404(db, code)
        project = await crud.project.update_project(db, project, updates, current_user.id)
        return ProjectResponse.from_model(project, await crud.project.get_project_task_count(db, project.id))
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update project", code=code, error=str(e))
        raise InternalError("Failed to update project")


@router.delete("/{code}")
async def delete_project(
        code: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Delete a project and every task in it"""
    try:
        project = await get_project_or_404(db, code)
        await crud.project.delete_project(db, project)
        tracing.info("Project deleted", code=code, user=current_user.email)
        return {"message": "Project deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete project", code=code, error=str(e))
        raise InternalError("Failed to delete project")


@router.get("/{code}/tasks", response_model=List[TaskResponse])
async def list_project_tasks(
        code: str,
        task_status: Optional[str] = Query(None, alias="status", max_length=25, pattern=STATUS_CODE_PATTERN),
        priority: Optional[TaskPriority] = Query(None),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        project = await get_project_or_404(db, code)
        tasks = await crud.task.get_tasks(db, project_id=project.id, status=task_status, priority=priority)
        return [TaskResponse.from_model(task) for task in tasks]
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to list project tasks", code=code, error=str(e))
        raise InternalError("Failed to fetch project tasks")


@router.get("/{code}/statuses", response_model=StatusWorkflow)
async def get_status_workflow(
        code: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """The project's ordered status codes, as stored"""
    project = await get_project_or_404(db, code)
    return StatusWorkflow(status_workflow=crud.project.get_workflow(project))


@router.put("/{code}/statuses", response_model=StatusWorkflow)
async def update_status_workflow(
        code: str,
        workflow: StatusWorkflow,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """
    Replace the project's status workflow. Only the project leader may do
    this, and no status still holding tasks may be dropped.
    """
    try:
        project = await get_project_or_404(db, code)
        updated = await crud.project.update_status_workflow(db, project, workflow.status_workflow, current_user)
        tracing.info("Status workflow updated", code=code, workflow=updated, user=current_user.email)
        return StatusWorkflow(status_workflow=updated)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update status workflow", code=code, error=str(e))
        raise InternalError("Failed to update status workflow")
