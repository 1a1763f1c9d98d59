# app/db/crud/status_definition.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional, List, Set
from loguru import logger

from app.db.models import StatusDefinition
from app.api.v1.schemas.status_definitions import StatusDefinitionCreate
from app.exceptions.kanban import ConflictError


async def get_status_definitions(db: AsyncSession) -> List[StatusDefinition]:
    """Whole catalog, sorted by code"""
    result = await db.execute(select(StatusDefinition).order_by(StatusDefinition.code.asc()))
    return list(result.scalars().all())


async def get_status_definition(db: AsyncSession, code: str) -> Optional[StatusDefinition]:
    result = await db.execute(select(StatusDefinition).filter(StatusDefinition.code == code))
    return result.scalars().first()


async def get_status_codes(db: AsyncSession) -> Set[str]:
    result = await db.execute(select(StatusDefinition.code))
    return set(result.scalars().all())


async def create_status_definition(
        db: AsyncSession,
        data: StatusDefinitionCreate,
        creator_id: Optional[int] = None
) -> StatusDefinition:
    try:
        if await get_status_definition(db, data.code):
            raise ConflictError(f"Status definition '{data.code}' already exists")

        definition = StatusDefinition(
            code=data.code,
            description=data.description,
            created_by=creator_id,
            updated_by=creator_id
        )
        db.add(definition)
        await db.commit()
        await db.refresh(definition)
        logger.info(f"Status definition created: {definition.code}")
        return definition
    except Exception as e:
        logger.error(f"Failed to create status definition {data.code}: {e}")
        await db.rollback()
        raise


async def delete_status_definition(db: AsyncSession, definition: StatusDefinition) -> None:
    """Remove a catalog entry. Workflows already referencing it are left as they are."""
    try:
        await db.delete(definition)
        await db.commit()
        logger.info(f"Status definition deleted: {definition.code}")
    except Exception as e:
        logger.error(f"Failed to delete status definition {definition.code}: {e}")
        await db.rollback()
        raise
