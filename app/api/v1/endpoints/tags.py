# app/api/v1/endpoints/tags.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.db.database import get_db
from app.db import crud
from app.db.models import User, Tag
from app.api.v1.schemas.tags import TagCreate, TagUpdate, TagResponse
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.exceptions.kanban import NotFoundError, InternalError

router = APIRouter()


async def _get_tag_or_404(db: AsyncSession, name: str) -> Tag:
    tag = await crud.tag.get_tag(db, name)
    if not tag:
        raise NotFoundError("Tag not found")
    return tag


@router.get("", response_model=List[TagResponse])
async def list_tags(
        search: Optional[str] = Query(None, min_length=1, max_length=100),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """All tags with the number of tasks using each"""
    try:
        tags = await crud.tag.get_tags(db, search=search)
        return [TagResponse.from_model(tag, usage) for tag, usage in tags]
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to list tags", error=str(e))
        raise InternalError("Failed to fetch tags")


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
        tag_data: TagCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        tag = await crud.tag.create_tag(db, tag_data.name, tag_data.color)
        return TagResponse.from_model(tag)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to create tag", tag=tag_data.name, error=str(e))
        raise InternalError("Failed to create tag")


@router.get("/{tag}", response_model=TagResponse)
async def get_tag(
        tag: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    found = await _get_tag_or_404(db, tag)
    return TagResponse.from_model(found, await crud.tag.get_tag_usage(db, found.tag))


@router.put("/{tag}", response_model=TagResponse)
async def update_tag(
        tag: str,
        updates: TagUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        found = await _get_tag_or_404(db, tag)
        found = await crud.tag.update_tag(db, found, updates.color)
        return TagResponse.from_model(found, await crud.tag.get_tag_usage(db, found.tag))
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update tag", tag=tag, error=str(e))
        raise InternalError("Failed to update tag")


@router.delete("/{tag}")
async def delete_tag(
        tag: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Delete a tag; tasks using it simply lose it"""
    try:
        found = await _get_tag_or_404(db, tag)
        await crud.tag.delete_tag(db, found)
        tracing.info("Tag deleted", tag=tag, user=current_user.email)
        return {"message": "Tag deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete tag", tag=tag, error=str(e))
        raise InternalError("Failed to delete tag")
