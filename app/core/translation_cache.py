# app/core/translation_cache.py
"""In-memory copy of the UI translation bundles"""
from typing import Dict, List, Optional, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core import tracing
from app.db.models import Translation


class TranslationCache:
    """Language code -> translation document, with explicit initialize/refresh"""

    def __init__(self):
        self._bundles: Dict[str, Dict[str, Any]] = {}
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, db: AsyncSession) -> None:
        await self.refresh(db)
        self._initialized = True
        tracing.info("Translation cache initialized", languages=self.languages())

    async def refresh(self, db: AsyncSession) -> None:
        result = await db.execute(select(Translation.language_code, Translation.translations))
        self._bundles = {language_code: translations for language_code, translations in result.all()}

    def get(self, language_code: str) -> Optional[Dict[str, Any]]:
        return self._bundles.get(language_code)

    def languages(self) -> List[str]:
        return sorted(self._bundles)

    def clear(self) -> None:
        self._bundles = {}
        self._initialized = False


translation_cache = TranslationCache()
