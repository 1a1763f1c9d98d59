# app/db/crud/tag.py
import random
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from typing import Optional, List, Tuple, Sequence
from loguru import logger

from app.db.models import Tag, task_tags
from app.exceptions.kanban import ConflictError

TAG_PALETTE = [
    "#EF4444", "#F97316", "#F59E0B", "#EAB308", "#84CC16", "#22C55E",
    "#10B981", "#14B8A6", "#06B6D4", "#0EA5E9", "#3B82F6", "#6366F1",
    "#8B5CF6", "#A855F7", "#D946EF", "#EC4899", "#F43F5E", "#64748B",
]


def random_tag_color() -> str:
    return random.choice(TAG_PALETTE)


def normalize_tag(name: str) -> str:
    return name.strip().lower()


async def get_tags(db: AsyncSession, search: Optional[str] = None) -> List[Tuple[Tag, int]]:
    """Tags with the number of tasks using each, ordered by tag text"""
    usage = func.count(task_tags.c.task_id).label("usage_count")
    query = (
        select(Tag, usage)
        .outerjoin(task_tags, task_tags.c.tag == Tag.tag)
        .group_by(Tag.tag, Tag.color, Tag.created_at)
        .order_by(Tag.tag.asc())
    )
    if search:
        query = query.filter(Tag.tag.like(f"%{normalize_tag(search)}%"))

    result = await db.execute(query)
    return [(tag, count or 0) for tag, count in result.all()]


async def get_tag(db: AsyncSession, name: str) -> Optional[Tag]:
    result = await db.execute(select(Tag).filter(Tag.tag == normalize_tag(name)))
    return result.scalars().first()


async def get_tag_usage(db: AsyncSession, name: str) -> int:
    count = await db.scalar(select(func.count(task_tags.c.task_id)).filter(task_tags.c.tag == name))
    return count or 0


async def create_tag(db: AsyncSession, name: str, color: Optional[str] = None) -> Tag:
    try:
        tag_name = normalize_tag(name)
        if await get_tag(db, tag_name):
            raise ConflictError(f"Tag '{tag_name}' already exists")

        tag = Tag(tag=tag_name, color=(color or random_tag_color()).upper())
        db.add(tag)
        await db.commit()
        await db.refresh(tag)
        logger.info(f"Tag created: {tag.tag}")
        return tag
    except Exception as e:
        logger.error(f"Failed to create tag {name}: {e}")
        await db.rollback()
        raise


async def update_tag(db: AsyncSession, tag: Tag, color: str) -> Tag:
    try:
        tag.color = color.upper()
        await db.commit()
        await db.refresh(tag)
        logger.info(f"Tag {tag.tag} recoloured to {tag.color}")
        return tag
    except Exception as e:
        logger.error(f"Failed to update tag {tag.tag}: {e}")
        await db.rollback()
        raise


async def delete_tag(db: AsyncSession, tag: Tag) -> None:
    """Delete a tag and detach it from every task"""
    try:
        await db.execute(task_tags.delete().where(task_tags.c.tag == tag.tag))
        await db.delete(tag)
        await db.commit()
        logger.info(f"Tag deleted: {tag.tag}")
    except Exception as e:
        logger.error(f"Failed to delete tag {tag.tag}: {e}")
        await db.rollback()
        raise


async def get_or_create_tags(db: AsyncSession, names: Sequence[str]) -> List[Tag]:
    """
    Resolve tag names to Tag rows, adding unknown ones with a palette colour.
    Flushes but does not commit; the caller owns the transaction.
    """
    wanted: List[str] = []
    for name in names:
        tag_name = normalize_tag(name)
        if tag_name and tag_name not in wanted:
            wanted.append(tag_name)

    if not wanted:
        return []

    result = await db.execute(select(Tag).filter(Tag.tag.in_(wanted)))
    existing = {tag.tag: tag for tag in result.scalars().all()}

    tags = []
    for tag_name in wanted:
        tag = existing.get(tag_name)
        if tag is None:
            tag = Tag(tag=tag_name, color=random_tag_color())
            db.add(tag)
            logger.info(f"Tag auto-created: {tag_name}")
        tags.append(tag)

    await db.flush()
    return tags
