# app/db/crud/project.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
from sqlalchemy.orm import selectinload
from typing import Optional, List, Tuple, Sequence
from datetime import datetime, timezone
from loguru import logger

from app.core.config import settings
from app.core.workflow import find_invalid_codes, removed_statuses
from app.db.models import Project, Task, User
from app.db.crud.status_definition import get_status_codes
from app.api.v1.schemas.projects import ProjectCreate, ProjectUpdate
from app.exceptions.kanban import (
    ValidationError, ForbiddenError, ConflictError,
    InvalidStatusCodesError, StatusInUseError
)


async def get_projects(
        db: AsyncSession,
        leader_id: Optional[int] = None,
        search: Optional[str] = None
) -> List[Tuple[Project, int]]:
    """Projects ordered by title, each with its task count"""
    task_count = (
        select(func.count(Task.id))
        .filter(Task.project_id == Project.id)
        .correlate(Project)
        .scalar_subquery()
    )
    query = select(Project, task_count).options(selectinload(Project.leader))

    if leader_id is not None:
        query = query.filter(Project.leader_id == leader_id)

    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(func.lower(Project.title).like(pattern), func.lower(Project.code).like(pattern))
        )

    result = await db.execute(query.order_by(Project.title.asc()))
    return [(project, count or 0) for project, count in result.all()]


async def get_project_by_code(db: AsyncSession, code: str) -> Optional[Project]:
    result = await db.execute(
        select(Project)
        .options(selectinload(Project.leader))
        .filter(Project.code == code)
    )
    return result.scalars().first()


async def get_project_by_id(db: AsyncSession, project_id: int) -> Optional[Project]:
    result = await db.execute(
        select(Project)
        .options(selectinload(Project.leader))
        .filter(Project.id == project_id)
    )
    return result.scalars().first()


async def _reload_project(db: AsyncSession, project_id: int) -> Project:
    """Fresh copy of a project with its leader, for building responses after a commit"""
    result = await db.execute(
        select(Project)
        .options(selectinload(Project.leader))
        .filter(Project.id == project_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def lock_project(db: AsyncSession, project_id: int) -> Project:
    """
    Re-read the project row with FOR UPDATE so mutations of its tasks and
    workflow run one at a time. Engines without row locks ignore the clause.
    """
    result = await db.execute(
        select(Project)
        .filter(Project.id == project_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def get_project_task_count(db: AsyncSession, project_id: int) -> int:
    count = await db.scalar(select(func.count(Task.id)).filter(Task.project_id == project_id))
    return count or 0


async def _ensure_leader_exists(db: AsyncSession, leader_id: int) -> None:
    leader = await db.scalar(select(User.id).filter(User.id == leader_id))
    if leader is None:
        raise ValidationError(f"Leader with id {leader_id} not found")


async def _validate_codes(db: AsyncSession, workflow: Sequence[str]) -> None:
    invalid = find_invalid_codes(workflow, await get_status_codes(db))
    if invalid:
        raise InvalidStatusCodesError(invalid)


async def create_project(db: AsyncSession, project_data: ProjectCreate, creator_id: int) -> Project:
    """Create a project; the workflow defaults to the configured list"""
    try:
        if await get_project_by_code(db, project_data.code):
            raise ConflictError(f"Project code '{project_data.code}' already exists")

        await _ensure_leader_exists(db, project_data.leader_id)

        workflow = list(project_data.status_workflow or settings.default_status_workflow_list)
        if not workflow:
            raise ValidationError("statusWorkflow must be a non-empty array of status codes")
        await _validate_codes(db, workflow)

        project = Project(
            title=project_data.title,
            code=project_data.code,
            description=project_data.description,
            leader_id=project_data.leader_id,
            status_workflow=workflow,
            next_task_sequence=1,
            created_by=creator_id,
            updated_by=creator_id
        )
        db.add(project)
        await db.commit()

        logger.info(f"Project created: {project.code} by user {creator_id}")
        return await _reload_project(db, project.id)

    except Exception as e:
        logger.error(f"Failed to create project {project_data.code}: {e}")
        await db.rollback()
        raise


async def update_project(
        db: AsyncSession,
        project: Project,
        updates: ProjectUpdate,
        editor_id: int
) -> Project:
    """Update title, description or leader. The code never changes."""
    try:
        update_data = updates.model_dump(exclude_unset=True)
        if not update_data:
            raise ValidationError("No fields to update")

        if update_data.get("leader_id") is not None:
            await _ensure_leader_exists(db, update_data["leader_id"])

        for field, value in update_data.items():
            if field == "leader_id" and value is None:
                continue
            setattr(project, field, value)
        project.updated_by = editor_id

        await db.commit()
        logger.info(f"Project {project.code} updated by user {editor_id}")

        return await _reload_project(db, project.id)

    except Exception as e:
        logger.error(f"Failed to update project {project.code}: {e}")
        await db.rollback()
        raise


async def delete_project(db: AsyncSession, project: Project) -> None:
    """Delete a project together with its tasks, their tag links and images"""
    try:
        await db.delete(project)
        await db.commit()
        logger.info(f"Project {project.code} deleted")
    except Exception as e:
        logger.error(f"Failed to delete project {project.code}: {e}")
        await db.rollback()
        raise


def get_workflow(project: Project) -> List[str]:
    return list(project.status_workflow or [])


def ensure_status_in_workflow(project: Project, status: str) -> None:
    """Reject a task status the project's workflow does not contain"""
    if status not in get_workflow(project):
        raise ValidationError(
            f"Invalid status '{status}' for project {project.code}",
            errors=[{"field": "status", "message": f"Allowed statuses: {', '.join(get_workflow(project))}"}]
        )


async def has_tasks_with_status(db: AsyncSession, project_id: int, status: str) -> bool:
    """Whether any task of the project currently sits in the given status"""
    task_id = await db.scalar(
        select(Task.id)
        .filter(Task.project_id == project_id, Task.status == status)
        .limit(1)
    )
    return task_id is not None


async def update_status_workflow(
        db: AsyncSession,
        project: Project,
        requested: Sequence[str],
        user: User
) -> List[str]:
    """
    Replace the project's ordered status list.

    Checks run in order: non-empty list, leader only, every code known to the
    catalog (all offenders reported), then no removed status may still be held
    by a task (first offender reported). The list is stored exactly as given.
    """
    try:
        if not requested or not all(isinstance(code, str) for code in requested):
            raise ValidationError("statusWorkflow must be a non-empty array of status codes")

        if project.leader_id != user.id:
            raise ForbiddenError("Only project leaders can update status workflow")

        await _validate_codes(db, requested)

        locked = await lock_project(db, project.id)
        for code in removed_statuses(get_workflow(locked), requested):
            if await has_tasks_with_status(db, locked.id, code):
                raise StatusInUseError(code)

        locked.status_workflow = list(requested)
        locked.updated_by = user.id
        locked.updated_at = datetime.now(timezone.utc)
        await db.commit()

        logger.info(f"Status workflow of {locked.code} updated by user {user.id}: {list(requested)}")
        return get_workflow(locked)

    except Exception as e:
        logger.error(f"Failed to update status workflow of {project.code}: {e}")
        await db.rollback()
        raise
