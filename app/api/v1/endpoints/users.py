# app/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.db.database import get_db
from app.db import crud
from app.db.models import User
from app.api.v1.schemas.users import UserCreate, UserUpdate, UserResponse, UserWithTokenResponse
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.core.token_cache import token_cache
from app.exceptions.kanban import NotFoundError, InternalError
from app.middleware.rate_limiting import limiter

router = APIRouter()


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await crud.user.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(
        search: Optional[str] = Query(None, min_length=1, max_length=255),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        users = await crud.user.get_users(db, search=search)
        return [UserResponse.model_validate(user) for user in users]
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to list users", error=str(e))
        raise InternalError("Failed to fetch users")


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    tracing.info("User profile requested", user_email=current_user.email)
    return UserResponse.model_validate(current_user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
        user_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    tracing.info("User lookup initiated", user_id=user_id, requester=current_user.email)
    return UserResponse.model_validate(await _get_user_or_404(db, user_id))


@router.post("", response_model=UserWithTokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_user(
        request: Request,
        user_data: UserCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """Create a user and return its access token"""
    try:
        user = await crud.user.create_user(db, user_data.model_dump())
        await token_cache.refresh(db)
        tracing.info("User created", email=user.email, creator=current_user.email)
        return UserWithTokenResponse.model_validate(user)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to create user", error=str(e))
        raise InternalError("Failed to create user")


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
        user_id: int,
        updates: UserUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        user = await _get_user_or_404(db, user_id)
        user = await crud.user.update_user(db, user, updates.model_dump(exclude_unset=True))
        return UserResponse.model_validate(user)
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to update user", user_id=user_id, error=str(e))
        raise InternalError("Failed to update user")


@router.delete("/{user_id}")
async def delete_user(
        user_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    try:
        user = await _get_user_or_404(db, user_id)
        await crud.user.delete_user(db, user)
        await token_cache.refresh(db)
        tracing.info("User deleted", user_id=user_id, requester=current_user.email)
        return {"message": "User deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        tracing.error("Failed to delete user", user_id=user_id, error=str(e))
        raise InternalError("Failed to delete user")
