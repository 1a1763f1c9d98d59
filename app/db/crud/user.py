from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
from typing import Optional, List, Dict, Any
from uuid import uuid4
from loguru import logger

from app.db.models import User, Project
from app.exceptions.auth import UserAlreadyExistsError
from app.exceptions.kanban import ConflictError


async def get_users(db: AsyncSession, search: Optional[str] = None) -> List[User]:
    """All users ordered by name, optionally filtered by name or email"""
    query = select(User)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(func.lower(User.full_name).like(pattern), func.lower(User.email).like(pattern))
        )
    result = await db.execute(query.order_by(User.full_name.asc()))
    return list(result.scalars().all())


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(func.lower(User.email) == email.lower()))
    return result.scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    """
    Asynchronously retrieves a user by their ID.
    """
    result = await db.execute(select(User).filter(User.id == user_id))
    user = result.scalars().first()
    if user:
        logger.debug(f"User found: ID {user_id}")
    return user


async def create_user(db: AsyncSession, user_data: Dict[str, Any]) -> User:
    """
    Creates a user, minting a UUID access token when none is supplied.
    """
    try:
        if await get_user_by_email(db, user_data["email"]):
            raise UserAlreadyExistsError()

        user = User(
            full_name=user_data["full_name"],
            email=user_data["email"],
            access_token=user_data.get("access_token") or str(uuid4())
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info(f"User created successfully: {user.email}")
        return user
    except Exception as e:
        logger.error(f"Failed to create user: {e}")
        await db.rollback()
        raise


async def update_user(db: AsyncSession, user: User, update_data: Dict[str, Any]) -> User:
    try:
        new_email = update_data.get("email")
        if new_email and new_email.lower() != user.email.lower():
            if await get_user_by_email(db, new_email):
                raise UserAlreadyExistsError()

        for key, value in update_data.items():
            if value is not None:
                setattr(user, key, value)

        await db.commit()
        await db.refresh(user)
        logger.info(f"User updated successfully: {user.email}")
        return user
    except Exception as e:
        logger.error(f"Failed to update user {user.email}: {e}")
        await db.rollback()
        raise


async def delete_user(db: AsyncSession, user: User) -> None:
    """Delete a user; assigned tasks become unassigned, project leaders are protected"""
    try:
        led = await db.scalar(select(func.count(Project.id)).filter(Project.leader_id == user.id))
        if led:
            raise ConflictError("Cannot delete a user who leads projects")

        await db.delete(user)
        await db.commit()
        logger.info(f"User deleted successfully: {user.email}")
    except Exception as e:
        logger.error(f"Failed to delete user {user.email}: {e}")
        await db.rollback()
        raise
