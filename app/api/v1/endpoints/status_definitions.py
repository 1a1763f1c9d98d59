# app/api/v1/endpoints/status_definitions.py
"""Global status catalog endpoints"""
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db.database import get_db
from app.db import crud
from app.db.models import User
from app.api.v1.schemas.base import STATUS_CODE_PATTERN
from app.api.v1.schemas.status_definitions import StatusDefinitionCreate, StatusDefinitionResponse
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.exceptions.kanban import NotFoundError, InternalError

router = APIRouter()


@router.get("", response_model=List[StatusDefinitionResponse])
async def list_status_definitions(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """All status definitions, sorted by code"""
    try:
        definitions = await crud.status_definition.get_status_definitions(db)
        return [StatusDefinitionResponse.model_validate(definition) for definition in definitions]
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to fetch status definitions", error=str(e))
        raise InternalError("Failed to fetch status definitions")


@router.get("/{code}", response_model=StatusDefinitionResponse)
async def get_status_definition(
        code: str = Path(..., max_length=25, pattern=STATUS_CODE_PATTERN),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    definition = await crud.status_definition.get_status_definition(db, code)
    if not definition:
        raise NotFoundError("Status definition not found")
    return StatusDefinitionResponse.model_validate(definition)


@router.post("", response_model=StatusDefinitionResponse, status_code=status.HTTP_201_CREATED)
async def create_status_definition(
        data: StatusDefinitionCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        definition = await crud.status_definition.create_status_definition(db, data, current_user.id)
        tracing.info("Status definition created", code=definition.code, user=current_user.email)
        return StatusDefinitionResponse.model_validate(definition)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to create status definition", code=data.code, error=str(e))
        raise InternalError("Failed to create status definition")


@router.delete("/{code}")
async def delete_status_definition(
        code: str = Path(..., max_length=25, pattern=STATUS_CODE_PATTERN),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Remove a status from the catalog; existing project workflows are not revisited"""
    try:
        definition = await crud.status_definition.get_status_definition(db, code)
        if not definition:
            raise NotFoundError("Status definition not found")
        await crud.status_definition.delete_status_definition(db, definition)
        tracing.info("Status definition deleted", code=code, user=current_user.email)
        return {"message": "Status definition deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete status definition", code=code, error=str(e))
        raise InternalError("Failed to delete status definition")
