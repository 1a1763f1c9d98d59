# app/db/crud/image.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from typing import Optional, List
from loguru import logger

from app.core.config import settings
from app.db.models import ImageMetadata, ImageData, Task, StorageType
from app.exceptions.kanban import ValidationError


def validate_image(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image uploads are allowed")
    if size == 0:
        raise ValidationError("Uploaded file is empty")
    if size > settings.MAX_IMAGE_SIZE_BYTES:
        raise ValidationError(f"Image exceeds the {settings.MAX_IMAGE_SIZE_BYTES} byte limit")


async def store_image(
        db: AsyncSession,
        task: Task,
        original_name: str,
        content_type: str,
        data: bytes
) -> ImageMetadata:
    """Persist an image and its bytes for a task; the URL points at GET /images/{id}"""
    try:
        validate_image(content_type, len(data))

        image = ImageMetadata(
            task_id=task.id,
            original_name=original_name,
            content_type=content_type,
            file_size=len(data),
            storage_type=StorageType.LOCAL.value
        )
        image.payload = ImageData(data=data)
        db.add(image)
        await db.flush()

        image.url = f"/images/{image.id}"
        await db.commit()
        await db.refresh(image)

        logger.info(f"Image {image.id} stored for task {task.task_id} ({image.file_size} bytes)")
        return image

    except Exception as e:
        logger.error(f"Failed to store image for task {task.task_id}: {e}")
        await db.rollback()
        raise


async def get_task_images(db: AsyncSession, task_id: int) -> List[ImageMetadata]:
    result = await db.execute(
        select(ImageMetadata)
        .filter(ImageMetadata.task_id == task_id)
        .order_by(ImageMetadata.id.asc())
    )
    return list(result.scalars().all())


async def get_image(db: AsyncSession, image_id: int, with_data: bool = False) -> Optional[ImageMetadata]:
    query = select(ImageMetadata).filter(ImageMetadata.id == image_id)
    if with_data:
        query = query.options(selectinload(ImageMetadata.payload))
    result = await db.execute(query)
    return result.scalars().first()


async def delete_image(db: AsyncSession, image: ImageMetadata) -> None:
    try:
        await db.delete(image)
        await db.commit()
        logger.info(f"Image {image.id} deleted")
    except Exception as e:
        logger.error(f"Failed to delete image {image.id}: {e}")
        await db.rollback()
        raise
