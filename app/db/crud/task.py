# app/db/crud/task.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
from sqlalchemy.orm import selectinload
from typing import Optional, List, Dict, Sequence
from datetime import datetime, timezone
from loguru import logger

from app.core.positioning import next_append_position, plan_insert, redistributed_positions
from app.db.models import Task, Project, User, TaskPriority
from app.db.crud.project import lock_project, ensure_status_in_workflow, get_workflow
from app.db.crud.tag import get_or_create_tags
from app.api.v1.schemas.tasks import TaskCreate, TaskUpdate, PositionUpdate
from app.exceptions.kanban import ValidationError


def _with_relationships(query):
    return query.options(
        selectinload(Task.project),
        selectinload(Task.assignee),
        selectinload(Task.tags),
        selectinload(Task.images)
    )


async def _reload_task(db: AsyncSession, task_id: int) -> Task:
    """Fresh copy of a task with everything its response needs"""
    result = await db.execute(
        _with_relationships(select(Task))
        .filter(Task.id == task_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def get_task_by_id(db: AsyncSession, task_id: int) -> Optional[Task]:
    """Get task by numeric id with relationships loaded"""
    result = await db.execute(_with_relationships(select(Task)).filter(Task.id == task_id))
    return result.scalars().first()


async def get_task_by_task_id(db: AsyncSession, task_id: str) -> Optional[Task]:
    """Get task by its human identifier, e.g. WEBRED-3"""
    result = await db.execute(_with_relationships(select(Task)).filter(Task.task_id == task_id))
    return result.scalars().first()


async def get_tasks(
        db: AsyncSession,
        project_id: Optional[int] = None,
        status: Optional[str] = None,
        priority: Optional[TaskPriority] = None,
        assignee_id: Optional[int] = None,
        search: Optional[str] = None
) -> List[Task]:
    """Tasks matching the filters, grouped by status and ordered by position"""
    query = _with_relationships(select(Task))

    if project_id is not None:
        query = query.filter(Task.project_id == project_id)
    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if assignee_id is not None:
        query = query.filter(Task.assignee_id == assignee_id)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(func.lower(Task.title).like(pattern), func.lower(Task.prompt).like(pattern)))

    query = query.order_by(Task.status.asc(), Task.position.asc(), Task.id.asc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_column_tasks(db: AsyncSession, project_id: int, status: str) -> List[Task]:
    """Every task of one (project, status) column, by position"""
    result = await db.execute(
        select(Task)
        .filter(Task.project_id == project_id, Task.status == status)
        .order_by(Task.position.asc(), Task.id.asc())
    )
    return list(result.scalars().all())


async def get_column_positions(db: AsyncSession, project_id: int, status: str) -> List[Dict[str, int]]:
    result = await db.execute(
        select(Task.id, Task.position)
        .filter(Task.project_id == project_id, Task.status == status)
        .order_by(Task.position.asc(), Task.id.asc())
    )
    return [{"id": task_id, "position": position} for task_id, position in result.all()]


async def _append_position(
        db: AsyncSession,
        project_id: int,
        status: str,
        exclude_task_id: Optional[int] = None
) -> int:
    """Server-computed position at the bottom of a column"""
    query = select(func.max(Task.position)).filter(Task.project_id == project_id, Task.status == status)
    if exclude_task_id is not None:
        query = query.filter(Task.id != exclude_task_id)
    return next_append_position(await db.scalar(query))


async def _ensure_assignee_exists(db: AsyncSession, assignee_id: Optional[int]) -> None:
    if assignee_id is None:
        return
    if await db.scalar(select(User.id).filter(User.id == assignee_id)) is None:
        raise ValidationError(f"Assignee with id {assignee_id} not found")


async def create_task(db: AsyncSession, task_data: TaskCreate, project: Project) -> Task:
    """
    Create a task at the bottom of its column.

    The project row is locked while the next task identifier is minted, so
    concurrent creations in one project never share an identifier.
    """
    try:
        locked = await lock_project(db, project.id)
        status = task_data.status or get_workflow(locked)[0]
        ensure_status_in_workflow(locked, status)
        await _ensure_assignee_exists(db, task_data.assignee_id)

        sequence = locked.next_task_sequence
        locked.next_task_sequence = sequence + 1

        task = Task(
            task_id=f"{locked.code}-{sequence}",
            project_id=locked.id,
            title=task_data.title,
            status=status,
            position=await _append_position(db, locked.id, status),
            priority=task_data.priority,
            story_points=task_data.story_points,
            assignee_id=task_data.assignee_id,
            prompt=task_data.prompt,
            is_blocked=task_data.is_blocked,
            blocked_reason=task_data.blocked_reason,
            git_feature_branch=task_data.git_feature_branch,
            git_pull_request_url=task_data.git_pull_request_url
        )

        if task_data.tag_names:
            task.tags = await get_or_create_tags(db, task_data.tag_names)

        db.add(task)
        await db.commit()

        logger.info(f"Task created: {task.task_id} in {task.status} at position {task.position}")
        return await _reload_task(db, task.id)

    except Exception as e:
        logger.error(f"Failed to create task in project {project.code}: {e}")
        await db.rollback()
        raise


async def update_task(db: AsyncSession, task: Task, updates: TaskUpdate) -> Task:
    """
    Update task details. A new status appends the task to that column unless
    an explicit position is supplied with it.
    """
    try:
        update_data = updates.model_dump(exclude_unset=True)
        tag_names = update_data.pop("tag_names", None)
        new_status = update_data.pop("status", None)
        new_position = update_data.pop("position", None)

        if "assignee_id" in update_data:
            await _ensure_assignee_exists(db, update_data["assignee_id"])

        if new_status is not None and new_status != task.status:
            locked = await lock_project(db, task.project_id)
            ensure_status_in_workflow(locked, new_status)
            task.status = new_status
            if new_position is None:
                new_position = await _append_position(db, task.project_id, new_status, exclude_task_id=task.id)

        if new_position is not None:
            task.position = new_position

        for field, value in update_data.items():
            if field in ("title", "priority", "is_blocked") and value is None:
                continue
            setattr(task, field, value)

        if tag_names is not None:
            task.tags = await get_or_create_tags(db, tag_names)

        await db.commit()
        logger.info(f"Task {task.task_id} updated")
        return await _reload_task(db, task.id)

    except Exception as e:
        logger.error(f"Failed to update task {task.task_id}: {e}")
        await db.rollback()
        raise


async def delete_task(db: AsyncSession, task: Task) -> None:
    """Delete a task (hard delete, cascades to tag links and images)"""
    try:
        await db.delete(task)
        await db.commit()
        logger.info(f"Task {task.task_id} deleted")
    except Exception as e:
        logger.error(f"Failed to delete task {task.task_id}: {e}")
        await db.rollback()
        raise


async def change_task_status(db: AsyncSession, task: Task, status: str) -> Task:
    """Move a task to the bottom of another column; the source column is not compacted"""
    try:
        locked = await lock_project(db, task.project_id)
        ensure_status_in_workflow(locked, status)

        old_status = task.status
        task.position = await _append_position(db, task.project_id, status, exclude_task_id=task.id)
        task.status = status
        task.updated_at = datetime.now(timezone.utc)

        await db.commit()
        logger.info(f"Task {task.task_id} status changed from {old_status} to {status} at position {task.position}")
        return await _reload_task(db, task.id)

    except Exception as e:
        logger.error(f"Failed to change status of task {task.task_id}: {e}")
        await db.rollback()
        raise


async def redistribute_column(db: AsyncSession, project_id: int, status: str) -> List[Task]:
    """
    Renumber a column to 10, 20, 30, ... keeping its current order.
    Flushes but does not commit; runs inside the caller's transaction.
    """
    column = await get_column_tasks(db, project_id, status)
    for column_task, position in zip(column, redistributed_positions(len(column))):
        column_task.position = position
    await db.flush()
    logger.info(f"Redistributed {len(column)} positions in project {project_id} column {status}")
    return column


async def set_position_verbatim(db: AsyncSession, task: Task, position: int, status: str) -> Task:
    """Caller-trusted write of status and position, no collision handling"""
    task.status = status
    task.position = position
    task.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return task


async def reposition_task(db: AsyncSession, task: Task, new_position: int, status: str) -> Task:
    """
    Drop a task at new_position in the given status column.

    Moving to another column stores the requested position as is. Within the
    same column the task takes the midpoint between its new neighbours, and
    the column is renumbered first when the neighbours are adjacent.
    """
    try:
        locked = await lock_project(db, task.project_id)

        if status != task.status:
            ensure_status_in_workflow(locked, status)
            await set_position_verbatim(db, task, new_position, status)
            await db.commit()
            logger.info(f"Task {task.task_id} moved to {status} at position {new_position}")
            return await _reload_task(db, task.id)

        if new_position == task.position:
            await db.commit()
            return task

        column = await get_column_tasks(db, task.project_id, status)
        plan = plan_insert([column_task.position for column_task in column], new_position)

        if plan.redistribute:
            await redistribute_column(db, task.project_id, status)

        task.position = plan.position
        task.updated_at = datetime.now(timezone.utc)
        await db.commit()

        logger.info(
            f"Task {task.task_id} repositioned to {plan.position} in {status}"
            f"{' after redistribution' if plan.redistribute else ''}"
        )
        return await _reload_task(db, task.id)

    except Exception as e:
        logger.error(f"Failed to reposition task {task.task_id}: {e}")
        await db.rollback()
        raise


async def bulk_update_positions(
        db: AsyncSession,
        project: Project,
        status: str,
        updates: Sequence[PositionUpdate]
) -> List[Dict[str, int]]:
    """
    Write client-computed positions for one column verbatim.
    Tasks outside the (project, status) column are skipped.
    """
    try:
        await lock_project(db, project.id)

        wanted = {update.task_id: update.new_position for update in updates}
        if wanted:
            result = await db.execute(
                select(Task).filter(
                    Task.id.in_(list(wanted)),
                    Task.project_id == project.id,
                    Task.status == status
                )
            )
            now = datetime.now(timezone.utc)
            for column_task in result.scalars().all():
                column_task.position = wanted[column_task.id]
                column_task.updated_at = now

        await db.commit()
        logger.info(f"Bulk updated {len(wanted)} positions in {project.code} column {status}")
        return await get_column_positions(db, project.id, status)

    except Exception as e:
        logger.error(f"Failed to bulk update positions in {project.code} column {status}: {e}")
        await db.rollback()
        raise


async def set_task_tags(db: AsyncSession, task: Task, tag_names: Sequence[str]) -> Task:
    """Replace the task's tag set, creating unknown tags on the way"""
    try:
        task.tags = await get_or_create_tags(db, tag_names)
        task.updated_at = datetime.now(timezone.utc)
        await db.commit()
        logger.info(f"Tags of task {task.task_id} set to {[tag.tag for tag in task.tags]}")
        return await _reload_task(db, task.id)
    except Exception as e:
        logger.error(f"Failed to set tags of task {task.task_id}: {e}")
        await db.rollback()
        raise
