# app/auth/dependencies.py - Static token authentication
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.core.config import settings
from app.core.token_cache import token_cache
from app.db.database import get_db
from app.db.models import User
from app.exceptions.auth import AuthenticationError

# Token is carried in a custom header, TB_TOKEN by default
token_header = APIKeyHeader(name=settings.AUTH_HEADER_NAME, auto_error=False)


async def get_current_user(
        db: AsyncSession = Depends(get_db),
        token: Optional[str] = Depends(token_header)
) -> User:
    """
    Resolve the request's access token to a user through the token cache
    """
    if not token:
        logger.warning("Request without access token")
        raise AuthenticationError()

    # Deferred: app.db.crud loads the routers, which import this module
    from app.db.crud.user import get_user_by_id

    user_id = token_cache.get_user_id(token)
    if user_id is None:
        logger.warning(f"Unknown access token | token={token[:6]}...")
        raise AuthenticationError()

    user = await get_user_by_id(db, user_id)
    if not user:
        logger.warning(f"Token maps to a missing user | user_id={user_id}")
        raise AuthenticationError()

    logger.debug(f"User authenticated successfully | email={user.email} | user_id={user.id}")
    return user
