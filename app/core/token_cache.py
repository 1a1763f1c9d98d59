# app/core/token_cache.py
"""In-memory lookup of static access tokens to user ids"""
from datetime import datetime, timezone
from typing import Dict, Optional, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core import tracing
from app.db.models import User


class TokenCache:
    """
    Read-mostly map of access token -> user id.

    Loaded with initialize() at startup and reloaded with refresh() whenever
    users are created or deleted. Request handling only reads from it.
    """

    def __init__(self):
        self._tokens: Dict[str, int] = {}
        self._initialized = False
        self._last_refresh: Optional[datetime] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, db: AsyncSession) -> None:
        await self.refresh(db)
        self._initialized = True
        tracing.info("Token cache initialized", tokens=len(self._tokens))

    async def refresh(self, db: AsyncSession) -> None:
        result = await db.execute(select(User.id, User.access_token))
        self._tokens = {token: user_id for user_id, token in result.all()}
        self._last_refresh = datetime.now(timezone.utc)
        tracing.debug("Token cache refreshed", tokens=len(self._tokens))

    def get_user_id(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        return self._tokens.get(token)

    def clear(self) -> None:
        self._tokens = {}
        self._initialized = False
        self._last_refresh = None

    def stats(self) -> Dict[str, Any]:
        return {
            "initialized": self._initialized,
            "token_count": len(self._tokens),
            "last_refresh": self._last_refresh.isoformat() if self._last_refresh else None,
        }


token_cache = TokenCache()
