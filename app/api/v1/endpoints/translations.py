# app/api/v1/endpoints/translations.py
import re
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.db.models import User
from app.api.v1.schemas.translations import TranslationResponse, LanguagesResponse, LANGUAGE_CODE_PATTERN
from app.auth.dependencies import get_current_user
from app.core import tracing
from app.core.translation_cache import translation_cache
from app.exceptions.kanban import ValidationError, NotFoundError

router = APIRouter()

_LANGUAGE_CODE = re.compile(LANGUAGE_CODE_PATTERN)


async def _ensure_cache(db: AsyncSession) -> None:
    if not translation_cache.is_initialized:
        await translation_cache.initialize(db)


@router.get("", response_model=LanguagesResponse)
async def list_languages(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    await _ensure_cache(db)
    return LanguagesResponse(languages=translation_cache.languages())


@router.get("/{language}", response_model=TranslationResponse)
async def get_translations(
        language: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """UI labels for a two-letter language code"""
    if not _LANGUAGE_CODE.fullmatch(language):
        raise ValidationError(
            "Invalid language code",
            errors=[{"field": "language", "message": "Must be two lowercase letters, e.g. 'en'"}]
        )

    await _ensure_cache(db)
    translations = translation_cache.get(language)
    if translations is None:
        tracing.warning("Translations requested for unknown language", language=language)
        raise NotFoundError(f"Translations not found for language: {language}")

    return TranslationResponse(translations=translations)
