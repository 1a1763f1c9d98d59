# app/api/v1/endpoints/images.py
"""Task image attachments"""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db.database import get_db
from app.db import crud
from app.db.models import User, ImageMetadata
from app.api.v1.schemas.images import ImageResponse
from app.api.v1.endpoints.tasks import get_task_or_404
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.exceptions.kanban import NotFoundError, InternalError

router = APIRouter()


async def _get_image_or_404(db: AsyncSession, image_id: int, with_data: bool = False) -> ImageMetadata:
    image = await crud.image.get_image(db, image_id, with_data=with_data)
    if not image:
        raise NotFoundError("Image not found")
    return image


@router.post("/tasks/{task_id}/images", response_model=ImageResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
        task_id: int,
        file: UploadFile = File(...),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Attach an image to a task"""
    try:
        task = await get_task_or_404(db, task_id)
        data = await file.read()
        image = await crud.image.store_image(
            db,
            task,
            original_name=file.filename or "upload",
            content_type=file.content_type,
            data=data
        )
        tracing.info("Image uploaded", task_id=task.task_id, image_id=image.id, size=image.file_size)
        return ImageResponse.model_validate(image)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to upload image", task_id=task_id, error=str(e))
        raise InternalError("Failed to upload image")
    finally:
        await file.close()


@router.get("/tasks/{task_id}/images", response_model=List[ImageResponse])
async def list_task_images(
        task_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    await get_task_or_404(db, task_id)
    images = await crud.image.get_task_images(db, task_id)
    return [ImageResponse.model_validate(image) for image in images]


@router.get("/images/{image_id}")
async def get_image(
        image_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Raw image bytes with their stored content type"""
    image = await _get_image_or_404(db, image_id, with_data=True)
    if image.payload is None:
        raise NotFoundError("Image data not found")
    return Response(
        content=image.payload.data,
        media_type=image.content_type,
        headers={"Content-Disposition": f'inline; filename="{image.original_name}"'}
    )


@router.delete("/images/{image_id}")
async def delete_image(
        image_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        image = await _get_image_or_404(db, image_id)
        await crud.image.delete_image(db, image)
        return {"message": "Image deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete image", image_id=image_id, error=str(e))
        raise InternalError("Failed to delete image")
